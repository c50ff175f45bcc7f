# jobs/tests/test_enums.py
from django.core.exceptions import PermissionDenied
from django.test import SimpleTestCase, TestCase

from accounts.tests.factories import make_company
from jobs.enums import JobCategory, SwissCanton, SwissRegion, SwissSubRegion
from jobs.models import JobListing
from jobs.policies import authorize, job_listing_policy


class SwissGeographyTest(SimpleTestCase):
    def test_canton_region(self):
        self.assertEqual(SwissCanton.ZURICH.region, SwissRegion.ZURICH)
        self.assertEqual(SwissCanton.GENEVA.region, SwissRegion.REGION_LEMANIQUE)
        self.assertEqual(SwissCanton.LIECHTENSTEIN.region, SwissRegion.OSTSCHWEIZ)

    def test_every_canton_has_a_region(self):
        for canton in SwissCanton:
            self.assertIsInstance(canton.region, SwissRegion)

    def test_region_cantons(self):
        self.assertEqual(SwissRegion.NORDWESTSCHWEIZ.canton_codes, ['BS', 'BL', 'AG'])
        self.assertNotIn('FL', SwissRegion.OSTSCHWEIZ.canton_codes)
        self.assertIn('SG', SwissRegion.OSTSCHWEIZ.canton_codes)

    def test_swiss_cantons_are_listed_in_exactly_one_region(self):
        listed = [code for region in SwissRegion for code in region.canton_codes]
        self.assertEqual(len(listed), len(set(listed)))
        self.assertEqual(set(listed), {canton.value for canton in SwissCanton} - {'FL'})

    def test_sub_regions(self):
        self.assertEqual(SwissSubRegion.WINTERTHUR.region, SwissRegion.ZURICH)
        self.assertEqual(
            SwissSubRegion.for_canton('ZH'),
            [SwissSubRegion.ZURICH_CITY, SwissSubRegion.ZURICH_OBERLAND,
             SwissSubRegion.ZURICH_UNTERLAND, SwissSubRegion.WINTERTHUR],
        )
        self.assertEqual(SwissSubRegion.for_region('ticino'), [SwissSubRegion.TESSIN])

    def test_postal_code_detection(self):
        self.assertEqual(SwissSubRegion.detect_from_postal_code('8001'), SwissSubRegion.ZURICH_CITY)
        self.assertEqual(SwissSubRegion.detect_from_postal_code(8400), SwissSubRegion.WINTERTHUR)
        self.assertIsNone(SwissSubRegion.detect_from_postal_code('3000'))
        self.assertIsNone(SwissSubRegion.detect_from_postal_code(None))
        self.assertEqual(SwissSubRegion.BERN.postal_codes, [])


class JobCategoryTest(SimpleTestCase):
    def test_options(self):
        options = JobCategory.options()
        self.assertEqual(len(options), 20)
        self.assertEqual(options['devops'], 'DevOps & Site Reliability Engineering')
        self.assertEqual(list(options)[0], 'software_engineering')


class JobListingPolicyTest(TestCase):
    def setUp(self):
        self.owner = make_company()
        self.other = make_company()
        self.listing = JobListing.objects.create(company=self.owner, title='Dev', description='d')

    def test_owner_may_change_the_listing(self):
        for ability in ('edit', 'update', 'delete'):
            self.assertTrue(getattr(job_listing_policy, ability)(self.owner, self.listing))

    def test_foreign_company_is_denied(self):
        response = job_listing_policy.update(self.other, self.listing)
        self.assertFalse(response)
        self.assertEqual(response.message, 'You do not own this job.')

        with self.assertRaisesMessage(PermissionDenied, 'You do not own this job.'):
            authorize(self.other, 'delete', self.listing)

    def test_view_and_create_are_open(self):
        self.assertTrue(authorize(self.other, 'view', self.listing))
        self.assertTrue(authorize(self.other, 'create'))
