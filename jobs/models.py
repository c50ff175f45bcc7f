# jobs/models.py
import os

from django.db import models
from django.db.models import Q
from django.forms.models import model_to_dict
from django.utils import timezone

from accounts.models import Applicant, BrandingImagesMixin, Company
from jobboard.images import file_exists, public_url

from .enums import (
    ApplicationProcess, ApplicationStatus, EmploymentType, ExperienceLevel, JobCategory, JobStatus,
    PaymentStatus, SalaryOption, SalaryType, SwissCanton, SwissRegion, SwissSubRegion, Workplace,
)


class JobTier(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    duration_days = models.PositiveIntegerField()
    featured = models.BooleanField(default=False)
    max_applications = models.PositiveIntegerField(null=True, blank=True)  # None = unlimited
    max_active_jobs = models.PositiveIntegerField(default=1)
    has_analytics = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['price']

    def __str__(self):
        return self.name

    def to_dict(self):
        data = model_to_dict(self)
        data['price'] = float(self.price)
        return data


class JobListingQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=JobStatus.PUBLISHED)

    def active(self):
        return self.filter(Q(active_until__isnull=True) | Q(active_until__gte=timezone.now()))

    def in_canton(self, canton):
        code = SwissCanton(canton).value
        return self.filter(
            Q(primary_canton_code=code) | Q(additional_locations__canton_code=code)
        ).distinct()

    def in_region(self, region):
        codes = SwissRegion(region).canton_codes
        return self.filter(
            Q(primary_canton_code__in=codes) | Q(additional_locations__canton_code__in=codes)
        ).distinct()

    def in_sub_region(self, sub_region):
        value = SwissSubRegion(sub_region).value
        return self.filter(
            Q(primary_sub_region=value) | Q(additional_locations__sub_region=value)
        ).distinct()

    def remote(self):
        return self.filter(allows_remote=True)


class JobListing(BrandingImagesMixin, models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='job_listings')
    job_tier = models.ForeignKey(JobTier, null=True, blank=True, on_delete=models.SET_NULL, related_name='job_listings')

    reference_number = models.CharField(max_length=255, unique=True, null=True, blank=True)
    title = models.CharField(max_length=255)
    description = models.TextField()

    employment_type = models.CharField(max_length=32, choices=EmploymentType.choices, null=True, blank=True)
    workload_min = models.PositiveSmallIntegerField(null=True, blank=True)  # percent
    workload_max = models.PositiveSmallIntegerField(null=True, blank=True)
    active_from = models.DateTimeField(null=True, blank=True)
    active_until = models.DateTimeField(null=True, blank=True)
    workplace = models.CharField(max_length=16, choices=Workplace.choices, null=True, blank=True)
    hierarchy = models.CharField(max_length=255, blank=True)
    experience_level = models.CharField(max_length=32, choices=ExperienceLevel.choices, null=True, blank=True)
    experience_years_min = models.PositiveSmallIntegerField(null=True, blank=True)
    experience_years_max = models.PositiveSmallIntegerField(null=True, blank=True)
    education_level = models.CharField(max_length=255, blank=True)
    languages = models.JSONField(default=list, blank=True)

    # location
    address = models.CharField(max_length=255, blank=True)
    postcode = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=255, blank=True)
    primary_canton_code = models.CharField(max_length=2, choices=SwissCanton.choices, null=True, blank=True, db_index=True)
    primary_sub_region = models.CharField(max_length=64, choices=SwissSubRegion.choices, null=True, blank=True)
    primary_latitude = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    primary_longitude = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    has_multiple_locations = models.BooleanField(default=False)
    allows_remote = models.BooleanField(default=False)

    # salary
    no_salary = models.BooleanField(default=False)
    salary_type = models.CharField(max_length=16, choices=SalaryType.choices, null=True, blank=True)
    salary_option = models.CharField(max_length=16, choices=SalaryOption.choices, null=True, blank=True)
    salary_min = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    salary_max = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    salary_currency = models.CharField(max_length=3, default='CHF')

    # application
    application_process = models.CharField(max_length=8, choices=ApplicationProcess.choices, default=ApplicationProcess.EMAIL)
    application_email = models.CharField(max_length=255, blank=True)
    application_url = models.CharField(max_length=255, blank=True)
    contact_person = models.CharField(max_length=255, blank=True)
    contact_email = models.CharField(max_length=255, blank=True)
    internal_notes = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=JobStatus.choices, default=JobStatus.DRAFT)

    categories = models.JSONField(default=list, blank=True)
    application_documents = models.JSONField(null=True, blank=True)
    screening_questions = models.JSONField(null=True, blank=True)

    use_company_logo = models.BooleanField(default=True)
    use_company_banner = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JobListingQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} @ {self.company}"

    def is_published(self):
        return self.status == JobStatus.PUBLISHED

    # -------------------------
    # Images
    # -------------------------
    def has_custom_logo(self):
        return file_exists(self.logo_path)

    def has_custom_banner(self):
        return file_exists(self.banner_path)

    @property
    def effective_logo_url(self):
        if not self.use_company_logo and self.has_custom_logo():
            return public_url(self.logo_path)
        return self.company.logo_url

    @property
    def effective_banner_url(self):
        if not self.use_company_banner and self.has_custom_banner():
            return public_url(self.banner_path)
        return self.company.banner_url

    # -------------------------
    # Categories / location
    # -------------------------
    @property
    def category_labels(self):
        options = JobCategory.options()
        return [options[value] for value in self.categories or [] if value in options]

    def primary_region(self):
        if not self.primary_canton_code:
            return None
        return SwissCanton(self.primary_canton_code).region

    def detect_and_set_sub_region(self):
        if self.postcode:
            sub_region = SwissSubRegion.detect_from_postal_code(self.postcode)
            self.primary_sub_region = sub_region.value if sub_region else None

    # -------------------------
    # Subscriptions
    # -------------------------
    def active_subscription(self):
        return (
            self.subscriptions
            .filter(payment_status=PaymentStatus.COMPLETED, expires_at__gt=timezone.now())
            .order_by('-expires_at', '-pk')
            .first()
        )

    def to_dict(self):
        data = model_to_dict(self, exclude=['internal_notes'])
        data.update({
            'id': self.pk,
            'company_id': self.company_id,
            'job_tier_id': self.job_tier_id,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'logo_url': self.logo_url,
            'banner_url': self.banner_url,
            'effective_logo_url': self.effective_logo_url,
            'effective_banner_url': self.effective_banner_url,
            'category_labels': self.category_labels,
        })
        data.pop('company', None)
        data.pop('job_tier', None)
        return data


class JobListingAdditionalLocation(models.Model):
    job_listing = models.ForeignKey(JobListing, on_delete=models.CASCADE, related_name='additional_locations')
    address = models.CharField(max_length=255, blank=True)
    postcode = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=255, blank=True)
    canton_code = models.CharField(max_length=2, choices=SwissCanton.choices, null=True, blank=True)
    sub_region = models.CharField(max_length=64, choices=SwissSubRegion.choices, null=True, blank=True)
    latitude = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    longitude = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)

    def __str__(self):
        return f"{self.city} ({self.canton_code or '-'})"

    def region(self):
        if not self.canton_code:
            return None
        return SwissCanton(self.canton_code).region

    def detect_and_set_sub_region(self):
        if self.postcode:
            sub_region = SwissSubRegion.detect_from_postal_code(self.postcode)
            self.sub_region = sub_region.value if sub_region else None


class JobListingSubscription(models.Model):
    job_listing = models.ForeignKey(JobListing, on_delete=models.CASCADE, related_name='subscriptions')
    job_tier = models.ForeignKey(JobTier, on_delete=models.CASCADE, related_name='subscriptions')
    purchased_at = models.DateTimeField()
    expires_at = models.DateTimeField(db_index=True)
    price_paid = models.DecimalField(max_digits=10, decimal_places=2)
    discount_applied = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    promo_code = models.CharField(max_length=255, blank=True)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING, db_index=True)
    payment_method = models.CharField(max_length=64, blank=True)
    transaction_id = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-purchased_at']

    def __str__(self):
        return f"{self.job_listing_id} / {self.job_tier} ({self.payment_status})"

    def is_active(self):
        return self.payment_status == PaymentStatus.COMPLETED and self.expires_at > timezone.now()

    def is_expired(self):
        return self.expires_at <= timezone.now()

    def days_remaining(self):
        if self.is_expired():
            return 0
        return (self.expires_at - timezone.now()).days


def application_document_upload_path(instance, filename):
    return os.path.join('applications', str(instance.applicant_id), filename)


class JobApplication(models.Model):
    job_listing = models.ForeignKey(JobListing, on_delete=models.CASCADE, related_name='applications')
    applicant = models.ForeignKey(Applicant, on_delete=models.CASCADE, related_name='applications')
    cv = models.FileField(upload_to=application_document_upload_path)
    cover_letter = models.FileField(upload_to=application_document_upload_path, null=True, blank=True)
    status = models.CharField(max_length=32, choices=ApplicationStatus.choices, default=ApplicationStatus.NEW)
    applied_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-applied_at']
        unique_together = ('job_listing', 'applicant')

    def __str__(self):
        return f"{self.applicant} -> {self.job_listing.title} ({self.status})"

    def to_dict(self):
        return {
            'id': self.pk,
            'status': self.status,
            'status_label': ApplicationStatus(self.status).label,
            'applied_at': self.applied_at,
            'cv': self.cv.name,
            'cover_letter': self.cover_letter.name if self.cover_letter else None,
            'job_listing': {
                'id': self.job_listing_id,
                'title': self.job_listing.title,
                'company': self.job_listing.company.name,
            },
        }
