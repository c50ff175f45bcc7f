# accounts/forms.py
import logging
import time

from django import forms
from django.conf import settings
from django.contrib.auth import password_validation
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _

from jobboard.forms import OptionalBooleanField

from .guards import get_guard
from .models import Applicant, Company

logger = logging.getLogger(__name__)


def validate_lowercase(value):
    if value != value.lower():
        raise ValidationError(_('The email field must be lowercase.'))


def check_password_confirmation(form, field='password'):
    """Same as a "confirmed" rule: ``<field>_confirmation`` must match."""
    password = form.cleaned_data.get(field)
    confirmation = form.cleaned_data.get(f'{field}_confirmation')
    if password and password != confirmation:
        form.add_error(field, _('The password field confirmation does not match.'))


def run_password_validators(form, user=None, field='password'):
    password = form.cleaned_data.get(field)
    if not password or form.has_error(field):
        return
    try:
        password_validation.validate_password(password, user)
    except ValidationError as error:
        form.add_error(field, error)


class RegisterCompanyForm(forms.ModelForm):
    email = forms.EmailField(
        max_length=255,
        validators=[validate_lowercase],
        error_messages={'unique': 'The email has already been taken.'},
    )
    url = forms.URLField(max_length=255, required=False)
    password = forms.CharField(strip=False, widget=forms.PasswordInput)
    password_confirmation = forms.CharField(strip=False, widget=forms.PasswordInput)

    class Meta:
        model = Company
        fields = ['name', 'email', 'address', 'postcode', 'city', 'url']

    def clean(self):
        cleaned = super().clean()
        check_password_confirmation(self)
        return cleaned

    def _post_clean(self):
        super()._post_clean()
        run_password_validators(self, self.instance)


class RegisterApplicantForm(forms.ModelForm):
    email = forms.EmailField(
        max_length=255,
        validators=[validate_lowercase],
        error_messages={'unique': 'The email has already been taken.'},
    )
    password = forms.CharField(strip=False, widget=forms.PasswordInput)
    password_confirmation = forms.CharField(strip=False, widget=forms.PasswordInput)

    class Meta:
        model = Applicant
        fields = ['first_name', 'last_name', 'email']

    def clean(self):
        cleaned = super().clean()
        check_password_confirmation(self)
        return cleaned

    def _post_clean(self):
        super()._post_clean()
        run_password_validators(self, self.instance)


class LoginForm(forms.Form):
    """
    Credentials for one guard. ``authenticate()`` signs the principal in
    and throttles repeated failures per email and client IP.
    """
    email = forms.EmailField(validators=[validate_lowercase])
    password = forms.CharField(strip=False)
    remember = OptionalBooleanField(required=False)

    def __init__(self, *args, request=None, guard=None, **kwargs):
        self.request = request
        self.guard = guard
        super().__init__(*args, **kwargs)

    def throttle_key(self):
        email = (self.cleaned_data.get('email') or '').lower()
        return f"login:{self.guard}:{email}|{self.request.META.get('REMOTE_ADDR', '')}"

    def authenticate(self):
        if not self.is_valid():
            return False

        key = self.throttle_key()
        if self._too_many_attempts(key):
            seconds = max(int(cache.get(f'{key}:timer', time.time()) - time.time()), 1)
            logger.warning("Login locked out for %s", key)
            self.add_error('email', _('Too many login attempts. Please try again in %(seconds)s seconds.') % {
                'seconds': seconds,
            })
            return False

        credentials = {
            'email': self.cleaned_data['email'],
            'password': self.cleaned_data['password'],
        }
        if not get_guard(self.request, self.guard).attempt(credentials, bool(self.cleaned_data.get('remember'))):
            self._hit(key)
            self.add_error('email', _('These credentials do not match our records.'))
            return False

        cache.delete_many([key, f'{key}:timer'])
        return True

    @staticmethod
    def _too_many_attempts(key):
        return cache.get(key, 0) >= settings.LOGIN_MAX_ATTEMPTS

    @staticmethod
    def _hit(key):
        decay = settings.LOGIN_DECAY_SECONDS
        cache.add(f'{key}:timer', time.time() + decay, decay)
        if not cache.add(key, 1, decay):
            cache.incr(key)


class ForgotPasswordForm(forms.Form):
    email = forms.EmailField()


class NewPasswordForm(forms.Form):
    token = forms.CharField()
    email = forms.EmailField()
    password = forms.CharField(strip=False)
    password_confirmation = forms.CharField(strip=False)

    def clean(self):
        cleaned = super().clean()
        check_password_confirmation(self)
        run_password_validators(self)
        return cleaned
