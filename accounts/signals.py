# accounts/signals.py
"""
Authentication lifecycle signals. Every signal is sent with ``guard`` (the
guard name) and, where one exists, ``user``.
"""
import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

attempting = Signal()       # guard, credentials, remember
authenticated = Signal()    # guard, user, remember
failed = Signal()           # guard, user, credentials
logged_out = Signal()       # guard, user
registered = Signal()       # guard, user
verified = Signal()         # guard, user
password_reset = Signal()   # guard, user


@receiver(registered)
def send_email_verification_notification(sender, user, guard, **kwargs):
    from .notifications import send_verification_email

    if user.has_verified_email():
        return
    send_verification_email(user)


@receiver(failed)
def log_failed_login(sender, guard, credentials, **kwargs):
    logger.info("Failed %s login for %s", guard, credentials.get('email'))
