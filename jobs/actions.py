# jobs/actions.py
"""
Write operations on job listings. Each one runs in a single transaction.
"""
import logging
import secrets
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from .enums import ExperienceLevel, JobCategory, JobStatus, PaymentStatus, SalaryType, Workplace
from .models import JobListing, JobListingSubscription

logger = logging.getLogger(__name__)

BENEFITS_MARKER = "\n\n## Benefits\n\n"

SENIORITY_TO_EXPERIENCE = {
    'no_experience': ExperienceLevel.ENTRY,
    'junior': ExperienceLevel.JUNIOR,
    'mid_level': ExperienceLevel.MID_LEVEL,
    'professional': ExperienceLevel.PROFESSIONAL,
    'senior': ExperienceLevel.SENIOR,
    'lead': ExperienceLevel.EXECUTIVE,
}
EXPERIENCE_TO_SENIORITY = {level.value: seniority for seniority, level in SENIORITY_TO_EXPERIENCE.items()}

# stored employment type -> wizard option
EMPLOYMENT_TYPE_OPTIONS = {
    'permanent': 'permanent',
    'temporary': 'temporary',
    'freelance': 'freelance',
    'internship': 'internship',
    'side-job': 'side_job',
    'apprenticeship': 'apprenticeship',
    'working-student': 'working_student',
    'interim': 'interim',
}

DEFAULT_APPLICATION_DOCUMENTS = {'cv': 'required', 'cover_letter': 'optional'}

def experience_level_for(seniority):
    return SENIORITY_TO_EXPERIENCE.get(seniority, ExperienceLevel.MID_LEVEL).value

def simulated_transaction_id():
    return 'sim_' + secrets.token_hex(8).upper()

def normalize_categories(categories):
    if not categories:
        return []
    return [JobCategory(value).value for value in categories]

def _wizard_description(data):
    description = data['description_and_requirements']
    if data.get('benefits'):
        description += BENEFITS_MARKER + data['benefits']
    return description

def _wizard_attributes(data):
    attributes = {
        'title': data['title'],
        'description': _wizard_description(data),
        'workload_min': data['workload_min'],
        'workload_max': data['workload_max'],
        'workplace': data['workplace'],
        'city': data['office_location'],
        'employment_type': data['employment_type_mapped'],
        'experience_level': experience_level_for(data.get('seniority_level')),
        'salary_min': data.get('salary_min'),
        'salary_max': data.get('salary_max'),
        'salary_type': data.get('salary_type') or SalaryType.YEARLY.value,
        'contact_person': data.get('contact_person') or '',
        'application_process': data['application_process'],
        'application_email': data.get('application_email') or '',
        'application_url': data.get('application_url') or '',
        'application_documents': data.get('application_documents'),
        'screening_questions': data.get('screening_questions'),
        'status': data['status'],
    }
    if data.get('categories') is not None:
        attributes['categories'] = normalize_categories(data['categories'])
    return attributes

def _is_set(value):
    return value is not None and value != ''

def _wizard_update_attributes(data):
    """
    Attributes for an edit. Optional values the form did not receive are left
    out so the stored ones survive.
    """
    attributes = {
        'title': data['title'],
        'description': _wizard_description(data),
        'workload_min': data['workload_min'],
        'workload_max': data['workload_max'],
        'workplace': data['workplace'],
        'city': data['office_location'],
    }
    if _is_set(data.get('employment_type_mapped')):
        attributes['employment_type'] = data['employment_type_mapped']
    if _is_set(data.get('seniority_level')):
        attributes['experience_level'] = experience_level_for(data['seniority_level'])
    if _is_set(data.get('salary_type')):
        attributes['salary_type'] = data['salary_type']
    for field in ('application_process', 'application_documents', 'screening_questions', 'status'):
        if _is_set(data.get(field)):
            attributes[field] = data[field]
    for field in ('salary_min', 'salary_max', 'contact_person', 'application_email', 'application_url'):
        if data.get(field):
            attributes[field] = data[field]
    if data.get('categories') is not None:
        attributes['categories'] = normalize_categories(data['categories'])
    return attributes

def _create_completed_subscription(listing, tier, now=None):
    now = now or timezone.now()
    return JobListingSubscription.objects.create(
        job_listing=listing,
        job_tier=tier,
        purchased_at=now,
        expires_at=now + timedelta(days=tier.duration_days),
        price_paid=tier.price,
        discount_applied=0,
        payment_status=PaymentStatus.COMPLETED,
        payment_method='credit_card',
        transaction_id=simulated_transaction_id(),
    )

@transaction.atomic
def create_custom_job_listing(company, data):
    sections = []
    if data.get('company_description'):
        sections.append("## About Us\n\n" + data['company_description'])
    sections.append("## Job Description\n\n" + data['description'])
    sections.append("## Requirements\n\n" + data['requirements'])
    if data.get('benefits'):
        sections.append("## Benefits\n\n" + data['benefits'])
    if data.get('final_words'):
        sections.append("## Additional Information\n\n" + data['final_words'])

    listing = JobListing.objects.create(
        company=company,
        title=data['title'],
        description="\n\n".join(sections),
        workload_min=data.get('workload_min'),
        workload_max=data.get('workload_max'),
        workplace=data['workplace'],
        city=data['office_location'],
        employment_type=data['employment_type_mapped'],
        experience_level=experience_level_for(data.get('seniority_level')),
        salary_min=data.get('salary_min'),
        salary_max=data.get('salary_max'),
        salary_type=data.get('salary_type') or SalaryType.YEARLY.value,
        categories=normalize_categories([data['category']]),
        application_process=data['application_process'],
        application_documents=data.get('application_documents'),
        screening_questions=data.get('screening_questions'),
        status=data['status'],
    )
    logger.info("Company %s created job listing %s", company.pk, listing.pk)
    return listing

@transaction.atomic
def create_job_listing_with_subscription(company, data):
    listing = JobListing.objects.create(company=company, **_wizard_attributes(data))

    tier = data.get('selected_tier_id')
    if tier is not None:
        listing.job_tier = tier
        listing.save(update_fields=['job_tier', 'updated_at'])
        _create_completed_subscription(listing, tier)

    logger.info(
        "Company %s created job listing %s with tier %s",
        company.pk, listing.pk, tier.pk if tier else None,
    )
    return listing

@transaction.atomic
def update_job_listing(company, listing, data):
    for field, value in _wizard_update_attributes(data).items():
        setattr(listing, field, value)
    listing.save()
    logger.info("Company %s updated job listing %s", company.pk, listing.pk)
    return listing

@transaction.atomic
def update_job_listing_with_subscription(listing, data):
    for field, value in _wizard_update_attributes(data).items():
        setattr(listing, field, value)

    tier = data.get('selected_tier_id')
    if tier is not None:
        current = listing.active_subscription()
        if current is None or current.job_tier_id != tier.pk:
            now = timezone.now()
            if current is not None:
                current.expires_at = now
                current.save(update_fields=['expires_at', 'updated_at'])
            _create_completed_subscription(listing, tier, now)
            logger.info(
                "Job listing %s moved from tier %s to tier %s",
                listing.pk, current.job_tier_id if current else None, tier.pk,
            )
        listing.job_tier = tier

    listing.save()
    listing.refresh_from_db()
    return listing

@transaction.atomic
def publish_job_listing_with_subscription(listing, tier):
    now = timezone.now()
    listing.status = JobStatus.PUBLISHED
    listing.job_tier = tier
    listing.save(update_fields=['status', 'job_tier', 'updated_at'])

    subscription, _created = JobListingSubscription.objects.update_or_create(
        job_listing=listing,
        defaults={
            'job_tier': tier,
            'purchased_at': now,
            'expires_at': now + timedelta(days=tier.duration_days),
            'price_paid': tier.price,
            'payment_status': PaymentStatus.PENDING,
        },
    )
    logger.info("Job listing %s published with tier %s", listing.pk, tier.pk)
    return subscription

@transaction.atomic
def delete_job_listing(company, listing):
    listing_id = listing.pk
    listing.delete()
    logger.info("Company %s deleted job listing %s", company.pk, listing_id)

def job_listing_form_data(listing):
    """Turn a stored listing back into the values the edit wizard starts from."""
    description = listing.description or ''
    benefits = ''
    if BENEFITS_MARKER in description:
        description, benefits = description.split(BENEFITS_MARKER, 1)

    return {
        'id': listing.pk,
        'company_id': listing.company_id,
        'title': listing.title,
        'workload_min': listing.workload_min if listing.workload_min is not None else 80,
        'workload_max': listing.workload_max if listing.workload_max is not None else 100,
        'description_and_requirements': description,
        'benefits': benefits,
        'contact_person': listing.contact_person,
        'workplace': listing.workplace or Workplace.ONSITE.value,
        'office_location': listing.city,
        'employment_type': EMPLOYMENT_TYPE_OPTIONS.get(listing.employment_type, 'permanent'),
        'seniority_level': EXPERIENCE_TO_SENIORITY.get(listing.experience_level, 'mid_level'),
        'categories': listing.categories or [],
        'salary_min': listing.salary_min,
        'salary_max': listing.salary_max,
        'salary_period': listing.salary_type or SalaryType.YEARLY.value,
        'skills': '',
        'application_documents': listing.application_documents or dict(DEFAULT_APPLICATION_DOCUMENTS),
        'screening_questions': listing.screening_questions or [],
        'application_process': listing.application_process,
        'application_email': listing.application_email,
        'application_url': listing.application_url,
        'status': listing.status,
        'job_tier_id': listing.job_tier_id,
    }
