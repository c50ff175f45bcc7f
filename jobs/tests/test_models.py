# jobs/tests/test_models.py
import shutil
import tempfile
from datetime import timedelta
from decimal import Decimal

from django.core.files.base import ContentFile
from django.test import TestCase, override_settings
from django.utils import timezone

from accounts.tests.factories import image_upload, make_company
from jobboard.images import public_storage
from jobs.enums import JobStatus, PaymentStatus, SwissRegion
from jobs.images import delete_job_listing_image, upload_job_listing_image
from jobs.models import JobListing, JobListingAdditionalLocation, JobListingSubscription, JobTier

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class ListingImageTest(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.company = make_company()
        self.company.logo_path = public_storage().save('company-images/logos/acme.png', ContentFile(b'png'))
        self.company.save()
        self.listing = JobListing.objects.create(company=self.company, title='Dev', description='d')

    def test_falls_back_to_the_company_logo(self):
        self.assertEqual(self.listing.effective_logo_url, self.company.logo_url)
        self.assertIsNone(self.listing.effective_banner_url)

    def test_custom_logo_only_when_the_company_logo_is_switched_off(self):
        path = upload_job_listing_image(self.listing, image_upload(500, 500, name='job.png'), 'logo')

        self.assertTrue(path.startswith('job-listing-images/logos/job-listing-%d-logo-' % self.listing.pk))
        self.assertFalse(self.listing.use_company_logo)
        self.assertEqual(self.listing.effective_logo_url, public_storage().url(path))
        self.assertEqual(self.listing.logo_dimensions, {'width': 400, 'height': 400})

        self.listing.use_company_logo = True
        self.assertEqual(self.listing.effective_logo_url, self.company.logo_url)

    def test_missing_custom_file_falls_back(self):
        self.listing.use_company_banner = False
        self.listing.banner_path = 'job-listing-images/banners/gone.png'
        self.assertIsNone(self.listing.effective_banner_url)

    def test_delete_switches_back_to_the_company_image(self):
        path = upload_job_listing_image(self.listing, image_upload(1200, 400, name='b.png'), 'banner')

        self.assertTrue(delete_job_listing_image(self.listing, 'banner'))

        self.assertFalse(public_storage().exists(path))
        self.listing.refresh_from_db()
        self.assertIsNone(self.listing.banner_path)
        self.assertTrue(self.listing.use_company_banner)

    def test_delete_without_image(self):
        self.assertTrue(delete_job_listing_image(self.listing, 'logo'))

    def test_invalid_type(self):
        with self.assertRaisesMessage(ValueError, 'Invalid image type: icon'):
            delete_job_listing_image(self.listing, 'icon')


class LocationQueryTest(TestCase):
    def setUp(self):
        company = make_company()
        self.zurich = JobListing.objects.create(
            company=company, title='Zürich', description='d',
            primary_canton_code='ZH', primary_sub_region='zurich_city',
        )
        self.geneva = JobListing.objects.create(
            company=company, title='Geneva', description='d', primary_canton_code='GE',
        )
        self.multi = JobListing.objects.create(
            company=company, title='Bern and Winterthur', description='d',
            primary_canton_code='BE', has_multiple_locations=True,
        )
        JobListingAdditionalLocation.objects.create(
            job_listing=self.multi, city='Winterthur', canton_code='ZH', sub_region='winterthur',
        )
        JobListingAdditionalLocation.objects.create(
            job_listing=self.multi, city='Zürich', canton_code='ZH', sub_region='zurich_city',
        )

    def titles(self, queryset):
        return sorted(listing.title for listing in queryset)

    def test_in_canton_matches_primary_and_additional_locations(self):
        self.assertEqual(
            self.titles(JobListing.objects.in_canton('ZH')), ['Bern and Winterthur', 'Zürich'],
        )
        self.assertEqual(self.titles(JobListing.objects.in_canton('GE')), ['Geneva'])

    def test_in_region(self):
        self.assertEqual(self.titles(JobListing.objects.in_region('region_lemanique')), ['Geneva'])
        self.assertEqual(
            self.titles(JobListing.objects.in_region(SwissRegion.ESPACE_MITTELLAND)), ['Bern and Winterthur'],
        )

    def test_in_sub_region(self):
        self.assertEqual(
            self.titles(JobListing.objects.in_sub_region('zurich_city')), ['Bern and Winterthur', 'Zürich'],
        )
        self.assertEqual(self.titles(JobListing.objects.in_sub_region('winterthur')), ['Bern and Winterthur'])

    def test_unknown_canton(self):
        with self.assertRaises(ValueError):
            JobListing.objects.in_canton('XX')

    def test_primary_region_and_sub_region_detection(self):
        self.assertEqual(self.zurich.primary_region(), SwissRegion.ZURICH)

        self.geneva.postcode = '8002'
        self.geneva.detect_and_set_sub_region()
        self.assertEqual(self.geneva.primary_sub_region, 'zurich_city')

        self.geneva.postcode = '1201'
        self.geneva.detect_and_set_sub_region()
        self.assertIsNone(self.geneva.primary_sub_region)


class StatusQueryTest(TestCase):
    def test_published_and_active(self):
        company = make_company()
        now = timezone.now()
        live = JobListing.objects.create(company=company, title='Live', description='d', status=JobStatus.PUBLISHED)
        JobListing.objects.create(
            company=company, title='Over', description='d', status=JobStatus.PUBLISHED,
            active_until=now - timedelta(days=1),
        )
        JobListing.objects.create(company=company, title='Draft', description='d')

        self.assertEqual(list(JobListing.objects.published().active()), [live])
        self.assertEqual(JobListing.objects.published().count(), 2)


class SubscriptionTest(TestCase):
    def setUp(self):
        self.listing = JobListing.objects.create(company=make_company(), title='Dev', description='d')
        self.tier = JobTier.objects.create(name='Basic', price=Decimal('99.00'), duration_days=30)

    def subscribe(self, expires_in, status=PaymentStatus.COMPLETED):
        now = timezone.now()
        return JobListingSubscription.objects.create(
            job_listing=self.listing, job_tier=self.tier, purchased_at=now,
            expires_at=now + expires_in, price_paid=self.tier.price, payment_status=status,
        )

    def test_helpers(self):
        running = self.subscribe(timedelta(days=10, hours=1))
        self.assertTrue(running.is_active())
        self.assertFalse(running.is_expired())
        self.assertEqual(running.days_remaining(), 10)

        over = self.subscribe(timedelta(days=-1))
        self.assertFalse(over.is_active())
        self.assertTrue(over.is_expired())
        self.assertEqual(over.days_remaining(), 0)

        pending = self.subscribe(timedelta(days=5), status=PaymentStatus.PENDING)
        self.assertFalse(pending.is_active())

    def test_active_subscription_is_the_latest_completed_one(self):
        self.subscribe(timedelta(days=-1))
        self.subscribe(timedelta(days=50), status=PaymentStatus.PENDING)
        short = self.subscribe(timedelta(days=5))
        long = self.subscribe(timedelta(days=20))

        self.assertEqual(self.listing.active_subscription(), long)
        long.delete()
        self.assertEqual(self.listing.active_subscription(), short)

    def test_tier_to_dict(self):
        data = self.tier.to_dict()
        self.assertEqual(data['price'], 99.0)
        self.assertEqual(data['name'], 'Basic')


class ListingDictTest(TestCase):
    def test_category_labels_and_hidden_notes(self):
        listing = JobListing.objects.create(
            company=make_company(), title='Dev', description='d',
            categories=['devops', 'unknown'], internal_notes='secret',
        )
        data = listing.to_dict()
        self.assertEqual(data['category_labels'], ['DevOps & Site Reliability Engineering'])
        self.assertNotIn('internal_notes', data)
        self.assertEqual(data['company_id'], listing.company_id)
