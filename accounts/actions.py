# accounts/actions.py
import logging

from django.db import transaction
from django.utils.crypto import get_random_string

from . import signals
from .models import Applicant, Company

logger = logging.getLogger(__name__)

COMPANY_OPTIONAL_FIELDS = ('address', 'postcode', 'city', 'url')


def create_company(data):
    """Create an active, unblocked company and announce the registration."""
    with transaction.atomic():
        company = Company(
            name=data['name'],
            first_name=data.get('first_name') or '',
            last_name=data.get('last_name') or '',
            phone_number=data.get('phone_number') or '',
            email=data['email'],
            active=True,
            blocked=False,
            **{field: data.get(field) or '' for field in COMPANY_OPTIONAL_FIELDS},
        )
        company.set_password(data['password'])
        company.save()

    logger.info("Company %s registered (%s)", company.pk, company.email)
    signals.registered.send(sender=Company, guard='company', user=company)
    return company


def create_applicant(data):
    with transaction.atomic():
        applicant = Applicant(
            first_name=data['first_name'],
            last_name=data['last_name'],
            email=data['email'],
        )
        applicant.set_password(data['password'])
        applicant.save()

    logger.info("Applicant %s registered (%s)", applicant.pk, applicant.email)
    signals.registered.send(sender=Applicant, guard='applicant', user=applicant)
    return applicant


def reset_password(user, password):
    """Set a new password and invalidate any remember-me cookie."""
    user.set_password(password)
    user.remember_token = get_random_string(60)
    user.save(update_fields=['password', 'remember_token'])
    signals.password_reset.send(sender=type(user), guard=user.guard_name, user=user)
