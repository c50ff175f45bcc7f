# accounts/tests/test_guards.py
from django.contrib.sessions.middleware import SessionMiddleware
from django.core.cache import cache
from django.test import Client, RequestFactory, TestCase
from django.urls import reverse

from accounts import signals
from accounts.guards import ModelUserProvider, get_guard, session_key
from accounts.models import Applicant, Company

from .factories import PASSWORD, login_as, make_applicant, make_company


def request_with_session(path='/'):
    request = RequestFactory().get(path)
    SessionMiddleware(lambda r: None).process_request(request)
    return request


class ProviderTest(TestCase):
    def setUp(self):
        self.company = make_company(email='acme@example.com')
        self.provider = ModelUserProvider(Company)

    def test_credentials_with_only_a_password_find_nobody(self):
        self.assertIsNone(self.provider.retrieve_by_credentials({'password': PASSWORD}))
        self.assertIsNone(self.provider.retrieve_by_credentials({}))

    def test_lookup_ignores_the_password_key(self):
        found = self.provider.retrieve_by_credentials({'email': 'acme@example.com', 'password': 'whatever'})
        self.assertEqual(found, self.company)

    def test_validate_credentials(self):
        self.assertTrue(self.provider.validate_credentials(self.company, {'password': PASSWORD}))
        self.assertFalse(self.provider.validate_credentials(self.company, {'password': 'nope'}))
        self.assertFalse(self.provider.validate_credentials(self.company, {'password': ['list']}))

    def test_provider_only_accepts_its_own_model(self):
        applicant = make_applicant()
        self.assertFalse(self.provider.validate_credentials(applicant, {'password': PASSWORD}))

    def test_retrieve_by_token(self):
        self.company.remember_token = 'token-123'
        self.company.save()
        self.assertEqual(self.provider.retrieve_by_token(self.company.pk, 'token-123'), self.company)
        self.assertIsNone(self.provider.retrieve_by_token(self.company.pk, 'token-456'))
        self.assertIsNone(self.provider.retrieve_by_token('not-an-id', 'token-123'))


class SessionGuardTest(TestCase):
    def setUp(self):
        self.company = make_company(email='acme@example.com')

    def test_validate_does_not_sign_in(self):
        request = request_with_session()
        guard = get_guard(request, 'company')
        self.assertTrue(guard.validate({'email': 'acme@example.com', 'password': PASSWORD}))
        self.assertEqual(guard.last_attempted, self.company)
        self.assertTrue(guard.guest())

    def test_attempt_signs_in_under_the_guard_key(self):
        request = request_with_session()
        guard = get_guard(request, 'company')
        self.assertTrue(guard.attempt({'email': 'acme@example.com', 'password': PASSWORD}))
        self.assertEqual(request.session[session_key('company')], self.company.pk)
        self.assertNotIn(session_key('applicant'), request.session)
        self.assertEqual(request.company, self.company)

    def test_failed_attempt(self):
        request = request_with_session()
        guard = get_guard(request, 'company')
        self.assertFalse(guard.attempt({'email': 'acme@example.com', 'password': 'wrong'}))
        self.assertTrue(guard.guest())

    def test_failed_signal_only_for_a_known_principal(self):
        sent = []

        def receiver(sender, user, **kwargs):
            sent.append(user)

        signals.failed.connect(receiver)
        self.addCleanup(signals.failed.disconnect, receiver)
        guard = get_guard(request_with_session(), 'company')

        self.assertFalse(guard.attempt({'email': 'nobody@example.com', 'password': PASSWORD}))
        self.assertEqual(sent, [])

        self.assertFalse(guard.attempt({'email': 'acme@example.com', 'password': 'wrong'}))
        self.assertEqual(sent, [self.company])

    def test_unknown_guard(self):
        with self.assertRaises(ValueError):
            get_guard(request_with_session(), 'admin')

    def test_guards_are_cached_per_request(self):
        request = request_with_session()
        self.assertIs(get_guard(request, 'company'), get_guard(request, 'company'))


class GuardIsolationTest(TestCase):
    def setUp(self):
        cache.clear()
        self.company = make_company()
        self.applicant = make_applicant()

    def test_company_session_does_not_authenticate_applicant(self):
        login_as(self.client, self.company)
        self.assertEqual(self.client.get(reverse('companies:dashboard')).status_code, 200)

        response = self.client.get(reverse('jobs:applicant_dashboard'))
        self.assertRedirects(response, reverse('accounts:applicant_login'), fetch_redirect_response=False)

    def test_both_guards_can_be_signed_in_at_once(self):
        login_as(self.client, self.company)
        login_as(self.client, self.applicant)
        self.assertEqual(self.client.get(reverse('companies:dashboard')).status_code, 200)
        self.assertEqual(self.client.get(reverse('jobs:applicant_dashboard')).status_code, 200)

    def test_logout_only_clears_that_guard_principal_token(self):
        login_as(self.client, self.company)
        self.company.remember_token = 'before'
        self.company.save()

        response = self.client.post(reverse('accounts:company_logout'))
        self.assertRedirects(response, reverse('accounts:company_login'), fetch_redirect_response=False)

        self.company.refresh_from_db()
        self.assertNotEqual(self.company.remember_token, 'before')
        self.assertNotIn(session_key('company'), self.client.session)


class RememberMeTest(TestCase):
    def setUp(self):
        cache.clear()
        self.company = make_company(email='acme@example.com')

    def test_recaller_cookie_restores_the_session(self):
        response = self.client.post(reverse('accounts:company_login'), {
            'email': 'acme@example.com',
            'password': PASSWORD,
            'remember': 'on',
        })
        self.assertRedirects(response, reverse('companies:dashboard'), fetch_redirect_response=False)
        self.assertIn('remember_company', response.cookies)

        self.company.refresh_from_db()
        self.assertTrue(self.company.remember_token)

        other = Client()
        other.cookies['remember_company'] = response.cookies['remember_company'].value
        self.assertEqual(other.get(reverse('companies:dashboard')).status_code, 200)
        self.assertEqual(other.session[session_key('company')], self.company.pk)

    def test_login_without_remember_sets_no_cookie(self):
        response = self.client.post(reverse('accounts:company_login'), {
            'email': 'acme@example.com',
            'password': PASSWORD,
        })
        self.assertNotIn('remember_company', response.cookies)

    def test_recaller_cookie_stops_working_after_logout(self):
        response = self.client.post(reverse('accounts:company_login'), {
            'email': 'acme@example.com',
            'password': PASSWORD,
            'remember': 'on',
        })
        cookie = response.cookies['remember_company'].value
        self.client.post(reverse('accounts:company_logout'))

        other = Client()
        other.cookies['remember_company'] = cookie
        response = other.get(reverse('companies:dashboard'))
        self.assertRedirects(response, reverse('accounts:company_login'), fetch_redirect_response=False)

    def test_applicant_cookie_is_not_a_company_cookie(self):
        applicant = make_applicant(email='anna@example.com')
        response = self.client.post(reverse('accounts:applicant_login'), {
            'email': 'anna@example.com',
            'password': PASSWORD,
            'remember': 'on',
        })
        self.assertIn('remember_applicant', response.cookies)
        self.assertNotIn('remember_company', response.cookies)
        self.assertTrue(Applicant.objects.get(pk=applicant.pk).remember_token)
