# accounts/guards.py
"""
Session guards for the two principal types.

A guard is bound to one request. Each guard stores the principal id
under its own session key, so a company and an applicant can be signed
in within the same browser session without stepping on each other.
"""
import logging

from django.apps import apps
from django.conf import settings
from django.utils import timezone
from django.utils.crypto import constant_time_compare, get_random_string

from . import signals

logger = logging.getLogger(__name__)

RECALLER_SALT = 'accounts.guards.recaller'


def session_key(name):
    return f'_auth_{name}_id'


def recaller_name(name):
    return f'remember_{name}'


def guard_config(name):
    try:
        return settings.AUTH_GUARDS[name]
    except KeyError:
        raise ValueError(f"Auth guard [{name}] is not defined.")


class ModelUserProvider:
    """Looks principals up in the database for a guard."""

    def __init__(self, model):
        self.model = model

    def retrieve_by_id(self, identifier):
        if identifier in (None, ''):
            return None
        try:
            return self.model.objects.get(pk=identifier)
        except (self.model.DoesNotExist, ValueError, TypeError):
            return None

    def retrieve_by_token(self, identifier, token):
        user = self.retrieve_by_id(identifier)
        if user is None or not user.remember_token or not token:
            return None
        if constant_time_compare(user.remember_token, token):
            return user
        return None

    def update_remember_token(self, user, token):
        user.remember_token = token
        user.save(update_fields=['remember_token'])

    def retrieve_by_credentials(self, credentials):
        credentials = {key: value for key, value in (credentials or {}).items()}
        if not credentials or (len(credentials) == 1 and 'password' in credentials):
            return None

        filters = {}
        for key, value in credentials.items():
            if key == 'password' or isinstance(value, (list, tuple, dict, set)):
                continue
            filters[key] = value
        if not filters:
            return None
        return self.model.objects.filter(**filters).first()

    def validate_credentials(self, user, credentials):
        if not isinstance(user, self.model):
            return False
        password = credentials.get('password')
        if not isinstance(password, str):
            return False
        return user.check_password(password)


class SessionGuard:
    name = None

    def __init__(self, request, provider=None):
        self.request = request
        self.provider = provider or ModelUserProvider(apps.get_model(guard_config(self.name)['model']))
        self.last_attempted = None
        self._user = None
        self._resolved = False
        self._logged_out = False

    @property
    def session_key(self):
        return session_key(self.name)

    @property
    def recaller_name(self):
        return recaller_name(self.name)

    @property
    def config(self):
        return guard_config(self.name)

    # -------------------------
    # Reading the current principal
    # -------------------------
    def user(self):
        if self._logged_out:
            return None
        if self._resolved:
            return self._user

        self._resolved = True
        user = self.provider.retrieve_by_id(self.request.session.get(self.session_key))

        if user is None:
            user = self._user_from_recaller()
            if user is not None:
                self._update_session(user.pk)
                signals.authenticated.send(sender=self.__class__, guard=self.name, user=user, remember=True)

        self._user = user
        return user

    def _user_from_recaller(self):
        value = self.request.get_signed_cookie(self.recaller_name, default=None, salt=RECALLER_SALT)
        if not value or '|' not in value:
            return None
        identifier, token = value.split('|', 1)
        return self.provider.retrieve_by_token(identifier, token)

    def check(self):
        return self.user() is not None

    def guest(self):
        return not self.check()

    def id(self):
        user = self.user()
        return user.pk if user is not None else None

    # -------------------------
    # Signing in and out
    # -------------------------
    def validate(self, credentials):
        self.last_attempted = user = self.provider.retrieve_by_credentials(credentials)
        return user is not None and self.provider.validate_credentials(user, credentials)

    def attempt(self, credentials, remember=False):
        signals.attempting.send(sender=self.__class__, guard=self.name, credentials=credentials, remember=remember)

        self.last_attempted = user = self.provider.retrieve_by_credentials(credentials)
        if user is None:
            return False

        if self.provider.validate_credentials(user, credentials):
            self.login(user, remember)
            return True

        signals.failed.send(sender=self.__class__, guard=self.name, user=user, credentials=credentials)
        return False

    def login(self, user, remember=False):
        self._update_session(user.pk)

        if remember:
            if not user.remember_token:
                self._cycle_remember_token(user)
            self._queue_recaller_cookie(user)

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        self._set_user(user)
        signals.authenticated.send(sender=self.__class__, guard=self.name, user=user, remember=remember)
        logger.info("%s %s signed in", self.name, user.pk)

    def logout(self):
        user = self.user()

        if user is not None:
            self._cycle_remember_token(user)
        self.request.session.pop(self.session_key, None)
        self._queue_cookie(self.recaller_name, None)

        signals.logged_out.send(sender=self.__class__, guard=self.name, user=user)

        self._user = None
        self._resolved = True
        self._logged_out = True
        setattr(self.request, self.name, None)

    # -------------------------
    # Internals
    # -------------------------
    def _set_user(self, user):
        self._user = user
        self._resolved = True
        self._logged_out = False
        setattr(self.request, self.name, user)

    def _update_session(self, identifier):
        self.request.session.cycle_key()
        self.request.session[self.session_key] = identifier

    def _cycle_remember_token(self, user):
        self.provider.update_remember_token(user, get_random_string(60))

    def _queue_recaller_cookie(self, user):
        self._queue_cookie(self.recaller_name, f'{user.pk}|{user.remember_token}')

    def _queue_cookie(self, name, value):
        queued = getattr(self.request, '_queued_cookies', None)
        if queued is None:
            queued = self.request._queued_cookies = {}
        queued[name] = value


class CompanyGuard(SessionGuard):
    name = 'company'


class ApplicantGuard(SessionGuard):
    name = 'applicant'


GUARD_CLASSES = {
    CompanyGuard.name: CompanyGuard,
    ApplicantGuard.name: ApplicantGuard,
}


def get_guard(request, name):
    """The request's guard instance for ``name`` (created on first use)."""
    guards = getattr(request, '_guards', None)
    if guards is None:
        guards = request._guards = {}
    if name not in guards:
        try:
            guard_class = GUARD_CLASSES[name]
        except KeyError:
            raise ValueError(f"Auth guard [{name}] is not defined.")
        guards[name] = guard_class(request)
    return guards[name]


def apply_queued_cookies(request, response):
    for name, value in getattr(request, '_queued_cookies', {}).items():
        if value is None:
            response.delete_cookie(name)
        else:
            response.set_signed_cookie(
                name, value, salt=RECALLER_SALT,
                max_age=settings.REMEMBER_COOKIE_AGE, httponly=True, samesite='Lax',
            )
    return response

