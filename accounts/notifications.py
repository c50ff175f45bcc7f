# accounts/notifications.py
import logging

from django.conf import settings
from django.core.mail import EmailMessage
from django.utils.translation import gettext as _

from .verification import verification_url

logger = logging.getLogger(__name__)

VERIFICATION_WORDING = {
    'company': {
        'subject': 'Verify Company Email Address',
        'intro': 'Please click the link below to verify your company email address.',
        'outro': 'If you did not create a company account, no further action is required.',
    },
    'applicant': {
        'subject': 'Verify Email Address',
        'intro': 'Please click the link below to verify your email address.',
        'outro': 'If you did not create an applicant account, no further action is required.',
    },
}


def _send(subject, lines, to):
    body = "\n".join(lines)
    email = EmailMessage(subject=subject, body=body, from_email=settings.DEFAULT_FROM_EMAIL, to=[to])
    email.send(fail_silently=False)
    logger.info("Sent '%s' to %s", subject, to)
    return True


def send_verification_email(principal):
    """
    Sends the signed verification link to a company or applicant.
    """
    wording = VERIFICATION_WORDING[principal.guard_name]
    lines = [
        _(wording['intro']),
        "",
        f"{_('Verify Email Address')}: {verification_url(principal)}",
        "",
        _(wording['outro']),
    ]
    return _send(_(wording['subject']), lines, principal.get_email_for_verification())


def send_password_reset_email(principal, url):
    minutes = settings.PASSWORD_RESET_TIMEOUT // 60
    lines = [
        _('You are receiving this email because we received a password reset request for your account.'),
        "",
        f"{_('Reset Password')}: {url}",
        "",
        _('This password reset link will expire in %(count)s minutes.') % {'count': minutes},
        "",
        _('If you did not request a password reset, no further action is required.'),
    ]
    return _send(_('Reset Password Notification'), lines, principal.email)
