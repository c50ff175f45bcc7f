# accounts/verification.py
"""
Temporary signed URLs and the email verification link built on them.

A signed URL carries ``expires`` (unix timestamp) and ``signature`` query
parameters; the signature covers the path and the expiry.
"""
import hashlib
import time

from django.conf import settings
from django.core.signing import Signer
from django.urls import reverse
from django.utils.crypto import constant_time_compare
from django.utils.http import urlencode

SIGNED_URL_SALT = 'accounts.verification.signed-url'


def _signer():
    return Signer(salt=SIGNED_URL_SALT)


def _payload(path, expires):
    return f'{path}?expires={expires}'


def temporary_signed_url(path, minutes):
    expires = int(time.time()) + minutes * 60
    signature = _signer().signature(_payload(path, expires))
    return f"{settings.APP_URL}{path}?{urlencode({'expires': expires, 'signature': signature})}"


def has_valid_signature(request):
    expires = request.GET.get('expires', '')
    signature = request.GET.get('signature', '')
    if not expires.isdigit() or not signature:
        return False
    expected = _signer().signature(_payload(request.path, expires))
    if not constant_time_compare(expected, signature):
        return False
    return int(expires) > time.time()


def email_hash(email):
    return hashlib.sha1(email.encode('utf-8')).hexdigest()


def verification_url(principal):
    path = reverse(
        f'accounts:{principal.guard_name}_verification_verify',
        kwargs={'pk': principal.pk, 'hash': email_hash(principal.get_email_for_verification())},
    )
    return temporary_signed_url(path, settings.EMAIL_VERIFICATION_EXPIRE_MINUTES)


def hash_matches(principal, given_hash):
    return constant_time_compare(email_hash(principal.get_email_for_verification()), given_hash)
