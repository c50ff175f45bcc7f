# companies/tests/test_models.py
import shutil
import tempfile
from datetime import timedelta

from django.core.files.base import ContentFile
from django.test import TestCase, override_settings
from django.utils import timezone

from accounts.models import Company
from accounts.tests.factories import make_company
from jobboard.images import public_storage

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class ProfileCompletionTest(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.company = make_company()

    def fill_profile(self):
        self.company.address = 'Bahnhofstrasse 1'
        self.company.postcode = '8001'
        self.company.city = 'Zürich'
        self.company.size = '11-50'
        self.company.type = 'AG'
        self.company.industry = 'Software'
        self.company.description_german = 'Wir bauen Software.'
        self.company.save()

    def test_new_company(self):
        steps = self.company.get_profile_completion_steps()
        self.assertEqual(steps, {
            'basic_info': True,
            'contact_info': False,
            'company_details': False,
            'description': False,
            'logo': False,
            'banner': False,
        })
        self.assertEqual(self.company.get_profile_completion_percentage(), 17)

    def test_below_threshold_is_not_complete(self):
        self.fill_profile()
        self.company.update_profile_completion()
        self.company.refresh_from_db()
        self.assertEqual(self.company.get_profile_completion_percentage(), 67)
        self.assertFalse(self.company.profile_completed)
        self.assertIsNone(self.company.profile_completed_at)
        self.assertEqual(self.company.get_missing_profile_steps(), ['logo', 'banner'])

    def test_logo_file_completes_the_profile(self):
        self.fill_profile()
        self.company.logo_path = public_storage().save('company-images/logos/acme.png', ContentFile(b'png'))
        self.company.save()

        self.company.update_profile_completion()
        self.company.refresh_from_db()
        self.assertEqual(self.company.get_profile_completion_percentage(), 83)
        self.assertTrue(self.company.profile_completed)
        self.assertIsNotNone(self.company.profile_completed_at)
        self.assertTrue(self.company.profile_completion_steps['logo'])

    def test_logo_path_without_file_does_not_count(self):
        self.company.logo_path = 'company-images/logos/missing.png'
        self.assertFalse(self.company.get_profile_completion_steps()['logo'])


class OnboardingTest(TestCase):
    def test_new_incomplete_company_sees_onboarding(self):
        self.assertTrue(make_company().should_show_onboarding())

    def test_completed_profile_hides_onboarding(self):
        company = make_company(profile_completed=True)
        self.assertFalse(company.should_show_onboarding())

    def test_onboarding_window_closes_after_thirty_days(self):
        company = make_company()
        Company.objects.filter(pk=company.pk).update(created_at=timezone.now() - timedelta(days=31))
        company.refresh_from_db()
        self.assertFalse(company.should_show_onboarding())


class ImageUrlTest(TestCase):
    def test_urls_and_sizes(self):
        company = make_company(logo_path='company-images/logos/a.png', logo_file_size=2048)
        self.assertEqual(company.logo_url, '/media/company-images/logos/a.png')
        self.assertIsNone(company.banner_url)
        self.assertEqual(company.logo_file_size_formatted, '2 KB')
        self.assertIsNone(company.banner_file_size_formatted)

    def test_to_dict_hides_secrets(self):
        data = make_company(internal_notes='vip').to_dict()
        for hidden in ('password', 'remember_token', 'internal_notes'):
            self.assertNotIn(hidden, data)
        self.assertIn('logo_url', data)
