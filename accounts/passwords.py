# accounts/passwords.py
import logging

from django.apps import apps
from django.conf import settings
from django.contrib.auth.tokens import PasswordResetTokenGenerator
from django.core.cache import cache
from django.urls import reverse
from django.utils.http import urlencode
from django.utils.translation import gettext_lazy as _

from .guards import ModelUserProvider, guard_config
from .notifications import send_password_reset_email

logger = logging.getLogger(__name__)

RESET_LINK_SENT = 'passwords.sent'
PASSWORD_RESET = 'passwords.reset'
INVALID_USER = 'passwords.user'
INVALID_TOKEN = 'passwords.token'
RESET_THROTTLED = 'passwords.throttled'

STATUS_MESSAGES = {
    RESET_LINK_SENT: _('We have emailed your password reset link.'),
    PASSWORD_RESET: _('Your password has been reset.'),
    INVALID_USER: _("We can't find a user with that email address."),
    INVALID_TOKEN: _('This password reset token is invalid.'),
    RESET_THROTTLED: _('Please wait before retrying.'),
}


class PrincipalTokenGenerator(PasswordResetTokenGenerator):
    """One salt per broker so a company token never validates for an applicant."""

    def __init__(self, broker_name):
        self.key_salt = f'accounts.passwords.{broker_name}'
        super().__init__()


class PasswordBroker:
    def __init__(self, name):
        config = settings.AUTH_PASSWORD_BROKERS[name]
        self.name = name
        self.guard = config['guard']
        self.throttle = config.get('throttle', 0)
        self.provider = ModelUserProvider(apps.get_model(guard_config(self.guard)['model']))
        self.tokens = PrincipalTokenGenerator(name)

    def _throttle_key(self, user):
        return f'password-reset:{self.name}:{user.pk}'

    def reset_url(self, user, token):
        path = reverse(f'accounts:{self.guard}_password_reset', kwargs={'token': token})
        return f"{settings.APP_URL}{path}?{urlencode({'email': user.email})}"

    def send_reset_link(self, credentials):
        user = self.provider.retrieve_by_credentials(credentials)
        if user is None:
            return INVALID_USER

        if self.throttle and cache.get(self._throttle_key(user)):
            return RESET_THROTTLED

        token = self.tokens.make_token(user)
        if self.throttle:
            cache.set(self._throttle_key(user), True, self.throttle)

        send_password_reset_email(user, self.reset_url(user, token))
        logger.info("Password reset link sent to %s %s", self.guard, user.pk)
        return RESET_LINK_SENT

    def reset(self, credentials, callback):
        """
        Validate ``credentials`` (email, token, password) and hand the
        principal and new password to ``callback`` on success.
        """
        user = self.provider.retrieve_by_credentials({'email': credentials.get('email')})
        if user is None:
            return INVALID_USER

        if not self.tokens.check_token(user, credentials.get('token')):
            return INVALID_TOKEN

        callback(user, credentials['password'])
        cache.delete(self._throttle_key(user))
        return PASSWORD_RESET


def broker_for_guard(guard):
    for name, config in settings.AUTH_PASSWORD_BROKERS.items():
        if config['guard'] == guard:
            return PasswordBroker(name)
    raise ValueError(f"No password broker is configured for the [{guard}] guard.")
