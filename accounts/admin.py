from django.contrib import admin
from .models import Applicant, Company


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'city', 'active', 'blocked', 'email_verified_at', 'created_at')
    list_filter = ('active', 'blocked', 'career_page_enabled', 'profile_completed')
    search_fields = ('name', 'email', 'city', 'career_page_slug')
    exclude = ('password', 'remember_token')


@admin.register(Applicant)
class ApplicantAdmin(admin.ModelAdmin):
    list_display = ('first_name', 'last_name', 'email', 'city', 'email_verified_at', 'created_at')
    search_fields = ('first_name', 'last_name', 'email')
    exclude = ('password', 'remember_token')
