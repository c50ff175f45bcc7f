from django.contrib import admin
from .models import JobApplication, JobListing, JobListingAdditionalLocation, JobListingSubscription, JobTier


@admin.register(JobTier)
class JobTierAdmin(admin.ModelAdmin):
    list_display = ('name', 'price', 'duration_days', 'featured', 'max_active_jobs', 'has_analytics')
    list_filter = ('featured', 'has_analytics')
    search_fields = ('name', 'description')


class AdditionalLocationInline(admin.TabularInline):
    model = JobListingAdditionalLocation
    extra = 0


@admin.register(JobListing)
class JobListingAdmin(admin.ModelAdmin):
    list_display = ('title', 'company', 'status', 'employment_type', 'workplace', 'job_tier', 'created_at')
    list_filter = ('status', 'workplace', 'employment_type', 'primary_canton_code')
    search_fields = ('title', 'company__name', 'description', 'city')
    inlines = [AdditionalLocationInline]


@admin.register(JobListingSubscription)
class JobListingSubscriptionAdmin(admin.ModelAdmin):
    list_display = ('job_listing', 'job_tier', 'payment_status', 'price_paid', 'purchased_at', 'expires_at')
    list_filter = ('payment_status', 'job_tier')
    search_fields = ('job_listing__title', 'transaction_id')


@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ('applicant', 'job_listing', 'status', 'applied_at')
    list_filter = ('status',)
    search_fields = ('applicant__email', 'applicant__first_name', 'applicant__last_name', 'job_listing__title')
