# accounts/models.py
from datetime import timedelta

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models
from django.forms.models import model_to_dict
from django.utils import timezone

from jobboard.images import file_exists, format_file_size, public_storage, public_url

PROFILE_COMPLETION_THRESHOLD = 70
ONBOARDING_WINDOW_DAYS = 30

HIDDEN_FIELDS = ('password', 'remember_token', 'last_login', 'internal_notes')


class PrincipalManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        principal = self.model(email=self.normalize_email(email), **extra_fields)
        principal.set_password(password)
        principal.save(using=self._db)
        return principal


class Principal(AbstractBaseUser):
    """
    Common base of the two account types. Each one authenticates through
    its own session guard (see accounts.guards); neither is AUTH_USER_MODEL.
    """
    guard_name = None

    email = models.EmailField(max_length=255, unique=True)
    email_verified_at = models.DateTimeField(null=True, blank=True)
    remember_token = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    EMAIL_FIELD = 'email'
    USERNAME_FIELD = 'email'

    objects = PrincipalManager()

    class Meta:
        abstract = True

    def has_verified_email(self):
        return self.email_verified_at is not None

    def mark_email_as_verified(self):
        self.email_verified_at = timezone.now()
        self.save(update_fields=['email_verified_at'])
        return True

    def get_email_for_verification(self):
        return self.email

    def to_dict(self):
        data = model_to_dict(self, exclude=HIDDEN_FIELDS)
        data['id'] = self.pk
        data['created_at'] = self.created_at
        data['updated_at'] = self.updated_at
        return data


class BrandingImagesMixin(models.Model):
    """Six metadata columns per image type, shared by companies and job listings."""

    logo_path = models.CharField(max_length=255, null=True, blank=True)
    logo_original_name = models.CharField(max_length=255, null=True, blank=True)
    logo_file_size = models.PositiveIntegerField(null=True, blank=True)
    logo_mime_type = models.CharField(max_length=100, null=True, blank=True)
    logo_dimensions = models.JSONField(null=True, blank=True)
    logo_uploaded_at = models.DateTimeField(null=True, blank=True)

    banner_path = models.CharField(max_length=255, null=True, blank=True)
    banner_original_name = models.CharField(max_length=255, null=True, blank=True)
    banner_file_size = models.PositiveIntegerField(null=True, blank=True)
    banner_mime_type = models.CharField(max_length=100, null=True, blank=True)
    banner_dimensions = models.JSONField(null=True, blank=True)
    banner_uploaded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def logo_url(self):
        return public_url(self.logo_path)

    @property
    def banner_url(self):
        return public_url(self.banner_path)

    @property
    def logo_file_size_formatted(self):
        if not self.logo_file_size:
            return None
        return format_file_size(self.logo_file_size)

    @property
    def banner_file_size_formatted(self):
        if not self.banner_file_size:
            return None
        return format_file_size(self.banner_file_size)

    def image_info(self, image_type):
        uploaded_at = getattr(self, f'{image_type}_uploaded_at')
        return {
            'url': getattr(self, f'{image_type}_url'),
            'original_name': getattr(self, f'{image_type}_original_name'),
            'file_size': getattr(self, f'{image_type}_file_size_formatted'),
            'mime_type': getattr(self, f'{image_type}_mime_type'),
            'dimensions': getattr(self, f'{image_type}_dimensions'),
            'uploaded_at': uploaded_at.strftime('%Y-%m-%d %H:%M:%S') if uploaded_at else None,
        }


class Company(BrandingImagesMixin, Principal):
    guard_name = 'company'

    name = models.CharField(max_length=255)
    first_name = models.CharField(max_length=255, blank=True)
    last_name = models.CharField(max_length=255, blank=True)
    phone_number = models.CharField(max_length=50, blank=True)
    address = models.CharField(max_length=255, blank=True)
    postcode = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=100, blank=True)
    latitude = models.DecimalField(max_digits=10, decimal_places=8, null=True, blank=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, null=True, blank=True)
    url = models.CharField(max_length=255, blank=True)
    size = models.CharField(max_length=50, blank=True)
    type = models.CharField(max_length=100, blank=True)
    industry = models.CharField(max_length=100, blank=True)
    description_english = models.TextField(blank=True)
    description_german = models.TextField(blank=True)
    description_french = models.TextField(blank=True)
    description_italian = models.TextField(blank=True)
    video = models.CharField(max_length=255, blank=True)
    newsletter = models.BooleanField(default=False)
    internal_notes = models.TextField(blank=True)
    active = models.BooleanField(default=True)
    blocked = models.BooleanField(default=False)

    # career page
    career_page_enabled = models.BooleanField(default=True)
    career_page_slug = models.CharField(max_length=255, unique=True, null=True, blank=True)
    career_page_image = models.CharField(max_length=255, null=True, blank=True)
    career_page_videos = models.JSONField(default=list, blank=True)
    career_page_domain = models.CharField(max_length=255, unique=True, null=True, blank=True)
    spontaneous_application_enabled = models.BooleanField(default=False)
    career_page_visibility = models.BooleanField(default=True)

    # onboarding
    profile_completed = models.BooleanField(default=False)
    profile_completed_at = models.DateTimeField(null=True, blank=True)
    profile_completion_steps = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'companies'

    def __str__(self):
        return self.name

    def has_logo(self):
        return file_exists(self.logo_path)

    def has_banner(self):
        return file_exists(self.banner_path)

    @property
    def career_page_image_url(self):
        return public_url(self.career_page_image)

    def delete_career_page_image(self):
        if self.career_page_image and public_storage().exists(self.career_page_image):
            public_storage().delete(self.career_page_image)
        self.career_page_image = None
        self.save(update_fields=['career_page_image', 'updated_at'])

    def get_profile_completion_steps(self):
        return {
            'basic_info': bool(self.name and self.email),
            'contact_info': bool(self.address and self.city and self.postcode),
            'company_details': bool(self.size and self.type and self.industry),
            'description': bool(
                self.description_german or self.description_english
                or self.description_french or self.description_italian
            ),
            'logo': self.has_logo(),
            'banner': self.has_banner(),
        }

    def get_profile_completion_percentage(self):
        steps = self.get_profile_completion_steps()
        return round(sum(1 for done in steps.values() if done) / len(steps) * 100)

    def get_missing_profile_steps(self):
        return [step for step, done in self.get_profile_completion_steps().items() if not done]

    def update_profile_completion(self):
        steps = self.get_profile_completion_steps()
        completed = self.get_profile_completion_percentage() >= PROFILE_COMPLETION_THRESHOLD

        self.profile_completion_steps = steps
        self.profile_completed = completed
        if completed and self.profile_completed_at is None:
            self.profile_completed_at = timezone.now()
        self.save(update_fields=[
            'profile_completion_steps', 'profile_completed', 'profile_completed_at', 'updated_at',
        ])

    def should_show_onboarding(self):
        if self.profile_completed:
            return False
        return self.created_at > timezone.now() - timedelta(days=ONBOARDING_WINDOW_DAYS)

    def to_dict(self):
        data = super().to_dict()
        data.update({
            'logo_url': self.logo_url,
            'banner_url': self.banner_url,
            'career_page_image_url': self.career_page_image_url,
            'logo_file_size_formatted': self.logo_file_size_formatted,
            'banner_file_size_formatted': self.banner_file_size_formatted,
        })
        return data


class Applicant(Principal):
    guard_name = 'applicant'

    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, blank=True)
    mobile_phone = models.CharField(max_length=50, blank=True)
    headline = models.CharField(max_length=255, blank=True)
    bio = models.TextField(blank=True)
    work_permit = models.CharField(max_length=100, blank=True)
    employment_type_preference = models.CharField(max_length=50, blank=True)
    workplace_preference = models.CharField(max_length=50, blank=True)
    available_from = models.DateField(null=True, blank=True)
    salary_expectation = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    resume_path = models.CharField(max_length=255, null=True, blank=True)
    profile_photo_path = models.CharField(max_length=255, null=True, blank=True)
    portfolio_url = models.URLField(max_length=255, blank=True)
    linkedin_url = models.URLField(max_length=255, blank=True)
    github_url = models.URLField(max_length=255, blank=True)
    website_url = models.URLField(max_length=255, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, blank=True)

    class Meta:
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        data = super().to_dict()
        data['full_name'] = self.full_name
        return data
