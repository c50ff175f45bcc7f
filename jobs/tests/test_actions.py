# jobs/tests/test_actions.py
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from accounts.tests.factories import make_company
from jobs import actions
from jobs.enums import JobStatus, PaymentStatus
from jobs.forms import JobListingWizardForm
from jobs.models import JobListing, JobListingSubscription, JobTier

from .test_forms import wizard_data


def cleaned(**overrides):
    form = JobListingWizardForm(wizard_data(**overrides))
    assert form.is_valid(), form.errors
    return form.cleaned_data


class ActionTestCase(TestCase):
    def setUp(self):
        self.company = make_company()
        self.basic = JobTier.objects.create(name='Basic', price=Decimal('99.00'), duration_days=30)
        self.premium = JobTier.objects.create(name='Premium', price=Decimal('199.00'), duration_days=60)


class CreateCustomListingTest(ActionTestCase):
    def test_description_is_assembled_from_sections(self):
        listing = actions.create_custom_job_listing(self.company, {
            'title': 'Data Engineer',
            'company_description': 'We are Acme.',
            'description': 'Pipelines.',
            'requirements': 'Python.',
            'benefits': 'Free lunch.',
            'final_words': 'Apply now.',
            'workplace': 'remote',
            'office_location': 'Bern',
            'employment_type_mapped': 'full-time',
            'seniority_level': 'lead',
            'category': 'data_science',
            'application_process': 'email',
            'status': 'draft',
        })

        self.assertEqual(listing.description, (
            "## About Us\n\nWe are Acme.\n\n"
            "## Job Description\n\nPipelines.\n\n"
            "## Requirements\n\nPython.\n\n"
            "## Benefits\n\nFree lunch.\n\n"
            "## Additional Information\n\nApply now."
        ))
        self.assertEqual(listing.categories, ['data_science'])
        self.assertEqual(listing.experience_level, 'executive')
        self.assertEqual(listing.salary_type, 'yearly')
        self.assertEqual(listing.city, 'Bern')
        self.assertEqual(listing.company, self.company)

    def test_optional_sections_are_left_out(self):
        listing = actions.create_custom_job_listing(self.company, {
            'title': 'Data Engineer',
            'description': 'Pipelines.',
            'requirements': 'Python.',
            'workplace': 'onsite',
            'office_location': 'Bern',
            'employment_type_mapped': 'contract',
            'category': 'data_science',
            'application_process': 'url',
            'status': 'draft',
        })
        self.assertEqual(listing.description, "## Job Description\n\nPipelines.\n\n## Requirements\n\nPython.")
        self.assertEqual(listing.experience_level, 'mid-level')


class CreateWithSubscriptionTest(ActionTestCase):
    def test_without_tier(self):
        listing = actions.create_job_listing_with_subscription(self.company, cleaned())
        self.assertIsNone(listing.job_tier)
        self.assertFalse(listing.subscriptions.exists())
        self.assertEqual(listing.experience_level, 'senior')
        self.assertEqual(listing.categories, ['software_engineering', 'devops'])

    def test_with_tier_creates_a_completed_subscription(self):
        before = timezone.now()
        listing = actions.create_job_listing_with_subscription(
            self.company, cleaned(selected_tier_id=self.basic.pk, benefits='Gym.'),
        )

        self.assertEqual(listing.job_tier, self.basic)
        self.assertEqual(listing.description, 'Build and run our Django services.\n\n## Benefits\n\nGym.')

        subscription = listing.subscriptions.get()
        self.assertEqual(subscription.payment_status, PaymentStatus.COMPLETED)
        self.assertEqual(subscription.payment_method, 'credit_card')
        self.assertRegex(subscription.transaction_id, r'^sim_[0-9A-F]{16}$')
        self.assertEqual(subscription.price_paid, Decimal('99.00'))
        self.assertEqual(subscription.discount_applied, 0)
        self.assertGreaterEqual(subscription.expires_at, before + timedelta(days=30))
        self.assertEqual(listing.active_subscription(), subscription)


class UpdateListingTest(ActionTestCase):
    def setUp(self):
        super().setUp()
        self.listing = actions.create_job_listing_with_subscription(
            self.company, cleaned(selected_tier_id=self.basic.pk),
        )

    def test_update_without_tier_change_keeps_the_subscription(self):
        listing = actions.update_job_listing_with_subscription(
            self.listing, cleaned(title='Senior Backend Engineer', selected_tier_id=self.basic.pk),
        )
        self.assertEqual(listing.title, 'Senior Backend Engineer')
        self.assertEqual(listing.subscriptions.count(), 1)

    def test_switching_tier_expires_the_current_subscription(self):
        old = self.listing.active_subscription()

        listing = actions.update_job_listing_with_subscription(
            self.listing, cleaned(selected_tier_id=self.premium.pk),
        )

        old.refresh_from_db()
        self.assertLessEqual(old.expires_at, timezone.now())
        self.assertFalse(old.is_active())

        current = listing.active_subscription()
        self.assertEqual(current.job_tier, self.premium)
        self.assertEqual(current.payment_status, PaymentStatus.COMPLETED)
        self.assertEqual(listing.job_tier, self.premium)
        self.assertEqual(listing.subscriptions.count(), 2)

    def test_update_keeps_values_the_form_did_not_receive(self):
        questions = [{'id': 'q1', 'text': 'Work permit?', 'requirement': 'knockout', 'answerType': 'yes/no'}]
        documents = {'cv': 'required', 'cover_letter': 'hidden'}
        JobListing.objects.filter(pk=self.listing.pk).update(
            screening_questions=questions, application_documents=documents,
            contact_person='Jane', salary_type='monthly', application_url='https://acme.ch/jobs',
        )
        self.listing.refresh_from_db()
        data = wizard_data(title='Renamed')
        del data['salary_period']
        del data['salary_min']
        form = JobListingWizardForm(data)
        self.assertTrue(form.is_valid(), form.errors)

        actions.update_job_listing(self.company, self.listing, form.cleaned_data)

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.title, 'Renamed')
        self.assertEqual(self.listing.screening_questions, questions)
        self.assertEqual(self.listing.application_documents, documents)
        self.assertEqual(self.listing.contact_person, 'Jane')
        self.assertEqual(self.listing.salary_type, 'monthly')
        self.assertEqual(self.listing.salary_min, Decimal('90000'))
        self.assertEqual(self.listing.application_url, 'https://acme.ch/jobs')

    def test_update_with_subscription_keeps_screening_questions(self):
        questions = [{'id': 'q1', 'text': 'Notice period?', 'requirement': 'optional', 'answerType': 'short-text'}]
        JobListing.objects.filter(pk=self.listing.pk).update(screening_questions=questions)
        self.listing.refresh_from_db()

        listing = actions.update_job_listing_with_subscription(
            self.listing, cleaned(selected_tier_id=self.basic.pk),
        )
        self.assertEqual(listing.screening_questions, questions)

    def test_plain_update(self):
        actions.update_job_listing(self.company, self.listing, cleaned(
            employment_type='freelance', workplace='remote', salary_period='hourly',
        ))
        self.listing.refresh_from_db()
        self.assertEqual(self.listing.employment_type, 'freelance')
        self.assertEqual(self.listing.workplace, 'remote')
        self.assertEqual(self.listing.salary_type, 'hourly')


class PublishTest(ActionTestCase):
    def test_publish_records_a_pending_subscription(self):
        listing = JobListing.objects.create(company=self.company, title='Dev', description='d')

        subscription = actions.publish_job_listing_with_subscription(listing, self.premium)

        listing.refresh_from_db()
        self.assertEqual(listing.status, JobStatus.PUBLISHED)
        self.assertEqual(listing.job_tier, self.premium)
        self.assertEqual(subscription.payment_status, PaymentStatus.PENDING)
        self.assertEqual(subscription.price_paid, Decimal('199.00'))
        self.assertIsNone(listing.active_subscription())

    def test_publishing_again_reuses_the_subscription_row(self):
        listing = JobListing.objects.create(company=self.company, title='Dev', description='d')
        actions.publish_job_listing_with_subscription(listing, self.basic)
        actions.publish_job_listing_with_subscription(listing, self.premium)

        subscription = JobListingSubscription.objects.get(job_listing=listing)
        self.assertEqual(subscription.job_tier, self.premium)


class FormDataTest(ActionTestCase):
    def test_edit_values_round_trip(self):
        listing = actions.create_job_listing_with_subscription(self.company, cleaned(
            employment_type='working-student', benefits='Gym.', seniority_level='no_experience',
        ))

        data = actions.job_listing_form_data(listing)

        self.assertEqual(data['description_and_requirements'], 'Build and run our Django services.')
        self.assertEqual(data['benefits'], 'Gym.')
        self.assertEqual(data['employment_type'], 'working_student')
        self.assertEqual(data['seniority_level'], 'no_experience')
        self.assertEqual(data['office_location'], 'Zürich')
        self.assertEqual(data['application_documents'], {'cv': 'required', 'cover_letter': 'optional'})
        self.assertEqual(data['screening_questions'], [])

    def test_defaults_for_sparse_listings(self):
        listing = JobListing.objects.create(company=self.company, title='Dev', description='Plain text.')
        data = actions.job_listing_form_data(listing)
        self.assertEqual((data['workload_min'], data['workload_max']), (80, 100))
        self.assertEqual(data['workplace'], 'onsite')
        self.assertEqual(data['salary_period'], 'yearly')
        self.assertEqual(data['employment_type'], 'permanent')
        self.assertEqual(data['seniority_level'], 'mid_level')
        self.assertEqual(data['benefits'], '')


class DeleteTest(ActionTestCase):
    def test_delete_cascades(self):
        listing = actions.create_job_listing_with_subscription(self.company, cleaned(selected_tier_id=self.basic.pk))
        actions.delete_job_listing(self.company, listing)
        self.assertFalse(JobListing.objects.exists())
        self.assertFalse(JobListingSubscription.objects.exists())
