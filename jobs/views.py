# jobs/views.py
import logging

from django.contrib import messages
from django.core.exceptions import PermissionDenied
from django.core.paginator import Paginator
from django.db import IntegrityError, transaction
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse
from django.utils import timezone
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from accounts.decorators import auth_required, verified_required
from companies.forms import IMAGE_UPLOAD_FORMS
from companies.views import company_required
from jobboard.images import ImageProcessingError
from jobboard.inertia import form_errors, render_page, request_data, validation_failed

from . import actions
from .enums import EmploymentType, ExperienceLevel, JobCategory, JobStatus, SalaryType, Workplace
from .forms import (
    CreateJobListingCustomForm, ImageToggleForm, JobApplicationForm, JobListingWizardForm,
    PublishForm, ScreeningForm,
)
from .images import delete_job_listing_image, upload_job_listing_image
from .models import JobApplication, JobListing, JobTier
from .policies import authorize

logger = logging.getLogger(__name__)

LISTINGS_PER_PAGE = 10
PUBLISH_SUCCESS_SESSION_KEY = 'publish_success'


def applicant_required(view_func):
    return auth_required('applicant')(verified_required('applicant')(view_func))


def _get_listing(pk):
    return get_object_or_404(JobListing.objects.select_related('company', 'job_tier'), pk=pk)


def _tiers():
    return [tier.to_dict() for tier in JobTier.objects.all()]


def _subscription_dict(subscription):
    if subscription is None:
        return None
    return {
        'id': subscription.pk,
        'job_tier': subscription.job_tier.to_dict(),
        'purchased_at': subscription.purchased_at,
        'expires_at': subscription.expires_at,
        'price_paid': float(subscription.price_paid),
        'payment_status': subscription.payment_status,
        'days_remaining': subscription.days_remaining(),
    }


def _label(enum, value):
    if not value:
        return None
    return {'value': value, 'label': enum(value).label}


def _labelled_listing(listing):
    """Listing data with enum values expanded to {value, label} for display pages."""
    data = listing.to_dict()
    data.update({
        'employment_type': _label(EmploymentType, listing.employment_type),
        'experience_level': _label(ExperienceLevel, listing.experience_level),
        'workplace': _label(Workplace, listing.workplace),
        'salary_type': _label(SalaryType, listing.salary_type),
        'categories': [
            {'value': value, 'label': label}
            for value, label in JobCategory.options().items()
            if value in (listing.categories or [])
        ],
        'company': listing.company.to_dict(),
    })
    return data


# -------------------------
# Company: listings
# -------------------------
@company_required
@require_http_methods(['GET', 'POST'])
def listing_index(request):
    company = request.company

    if request.method == 'POST':
        authorize(company, 'create')
        form = CreateJobListingCustomForm(request_data(request))
        if not form.is_valid():
            return validation_failed(request, form, 'jobs:create')
        listing = actions.create_custom_job_listing(company, form.cleaned_data)
        return redirect('jobs:listing', pk=listing.pk)

    page = Paginator(company.job_listings.all(), LISTINGS_PER_PAGE).get_page(request.GET.get('page'))
    return render_page(request, 'company/job-listings/index', {
        'jobListings': {
            'data': [listing.to_dict() for listing in page],
            'current_page': page.number,
            'last_page': page.paginator.num_pages,
            'per_page': LISTINGS_PER_PAGE,
            'total': page.paginator.count,
        },
    })


@company_required
@require_GET
def listing_create(request):
    company = request.company
    authorize(company, 'create')
    return render_page(request, 'company/job-listings/create', {
        'categoryOptions': JobCategory.options(),
        'companyLogo': company.logo_url,
        'companyBanner': company.banner_url,
        'jobTiers': _tiers(),
    })


@company_required
@require_POST
def listing_store_with_subscription(request):
    company = request.company
    authorize(company, 'create')
    form = JobListingWizardForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, 'jobs:create')

    listing = actions.create_job_listing_with_subscription(company, form.cleaned_data)
    messages.success(request, _('Job listing created and published successfully!'))
    return redirect('jobs:listing', pk=listing.pk)


@company_required
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def listing_detail(request, pk):
    company = request.company
    listing = _get_listing(pk)

    if request.method == 'DELETE':
        authorize(company, 'delete', listing)
        actions.delete_job_listing(company, listing)
        messages.success(request, _('Job listing deleted successfully.'))
        return redirect('jobs:listings')

    if request.method in ('PUT', 'PATCH'):
        authorize(company, 'update', listing)
        form = JobListingWizardForm(request_data(request))
        if not form.is_valid():
            return validation_failed(request, form, reverse('jobs:edit', args=[listing.pk]))
        actions.update_job_listing(company, listing, form.cleaned_data)
        messages.success(request, _('Job listing updated successfully.'))
        return redirect('jobs:listing', pk=listing.pk)

    authorize(company, 'view', listing)
    return render_page(request, 'company/job-listings/show', {
        'jobListing': _labelled_listing(listing),
        'currentSubscription': _subscription_dict(listing.active_subscription()),
    })


@company_required
@require_GET
def listing_edit(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'edit', listing)
    return render_page(request, 'company/job-listings/edit', {
        'jobListing': actions.job_listing_form_data(listing),
        'categoryOptions': JobCategory.options(),
        'companyLogo': request.company.logo_url,
        'companyBanner': request.company.banner_url,
        'jobTiers': _tiers(),
        'currentSubscription': _subscription_dict(listing.active_subscription()),
    })


@company_required
@require_http_methods(['POST', 'PUT', 'PATCH'])
def listing_update_with_subscription(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'update', listing)
    form = JobListingWizardForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, reverse('jobs:edit', args=[listing.pk]))

    listing = actions.update_job_listing_with_subscription(listing, form.cleaned_data)
    messages.success(request, _('Job listing updated successfully!'))
    return redirect('jobs:listing', pk=listing.pk)


@company_required
@require_http_methods(['GET', 'POST'])
def listing_screening(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'update', listing)

    if request.method == 'GET':
        return render_page(request, 'company/job-listings/screening', {
            'jobListing': listing.to_dict(),
        })

    form = ScreeningForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, reverse('jobs:screening', args=[listing.pk]))

    with transaction.atomic():
        listing.application_documents = form.cleaned_data['application_documents']
        listing.screening_questions = form.cleaned_data['screening_questions']
        listing.save(update_fields=['application_documents', 'screening_questions', 'updated_at'])

    messages.success(request, _('Screening questions and application requirements added successfully.'))
    return redirect('jobs:listing', pk=listing.pk)


@company_required
@require_GET
def listing_preview(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'view', listing)
    return render_page(request, 'company/job-listings/preview', {
        'jobListing': _labelled_listing(listing),
    })


# -------------------------
# Company: packages / publishing
# -------------------------
@company_required
@require_GET
def package_selection(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'update', listing)
    return render_page(request, 'company/job-listings/package-selection', {
        'jobListing': listing.to_dict(),
        'jobTiers': _tiers(),
        'currentSubscription': _subscription_dict(listing.active_subscription()),
    })


@company_required
@require_GET
def order_summary(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'update', listing)

    tier_id = request.GET.get('selected_tier_id')
    if not tier_id:
        return redirect('jobs:package_selection', pk=listing.pk)

    tier = JobTier.objects.filter(pk=tier_id).first() if tier_id.isdigit() else None
    if tier is None:
        messages.error(request, _('Invalid package selection.'))
        return redirect('jobs:package_selection', pk=listing.pk)

    return render_page(request, 'company/job-listings/order-summary', {
        'jobListing': listing.to_dict(),
        'selectedTier': tier.to_dict(),
    })


@company_required
@require_GET
def already_published(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'view', listing)
    return render_page(request, 'company/job-listings/already-published', {
        'jobListing': listing.to_dict(),
        'currentSubscription': _subscription_dict(listing.active_subscription()),
    })


@company_required
@require_POST
def publish(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'update', listing)

    if listing.is_published():
        return redirect('jobs:already_published', pk=listing.pk)

    form = PublishForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, reverse('jobs:package_selection', args=[listing.pk]))

    tier = form.cleaned_data['selected_tier_id']
    actions.publish_job_listing_with_subscription(listing, tier)
    request.session[PUBLISH_SUCCESS_SESSION_KEY] = {
        'tier_id': tier.pk,
        'published_at': timezone.now().isoformat(),
    }
    return redirect('jobs:success', pk=listing.pk)


@company_required
@require_GET
def publish_success(request, pk):
    listing = _get_listing(pk)
    authorize(request.company, 'view', listing)
    subscription = listing.subscriptions.select_related('job_tier').first()
    return render_page(request, 'company/job-listings/success', {
        'jobListing': _labelled_listing(listing),
        'subscription': _subscription_dict(subscription),
        'publishSuccess': request.session.pop(PUBLISH_SUCCESS_SESSION_KEY, None),
    })


# -------------------------
# Company: listing images (JSON)
# -------------------------
def _owned_listing_or_error(request, pk):
    listing = _get_listing(pk)
    try:
        authorize(request.company, 'update', listing)
    except PermissionDenied as exc:
        return listing, JsonResponse({'success': False, 'message': str(exc)}, status=403)
    return listing, None


def _listing_images_data(listing):
    return {
        'logo': listing.image_info('logo') if listing.has_custom_logo() else None,
        'banner': listing.image_info('banner') if listing.has_custom_banner() else None,
        'use_company_logo': listing.use_company_logo,
        'use_company_banner': listing.use_company_banner,
        'effective_logo_url': listing.effective_logo_url,
        'effective_banner_url': listing.effective_banner_url,
    }


@company_required
@require_GET
def listing_images(request, pk):
    listing, error = _owned_listing_or_error(request, pk)
    if error:
        return error
    return JsonResponse({'success': True, 'data': _listing_images_data(listing)})


@company_required
@require_http_methods(['POST', 'DELETE'])
def listing_image(request, pk, image_type):
    listing, error = _owned_listing_or_error(request, pk)
    if error:
        return error
    label = image_type.capitalize()

    if request.method == 'DELETE':
        deleted = delete_job_listing_image(listing, image_type)
        if not deleted:
            return JsonResponse({'success': False, 'message': f'Failed to delete {image_type}'}, status=500)
        return JsonResponse({
            'success': True,
            'message': _('%(label)s deleted successfully.') % {'label': label},
            'data': _listing_images_data(listing),
        })

    form = IMAGE_UPLOAD_FORMS[image_type](request.POST, request.FILES)
    if not form.is_valid():
        errors = form_errors(form)
        return JsonResponse({
            'success': False,
            'message': next(iter(errors.values())),
            'errors': form_errors(form, first_only=False),
        }, status=422)

    try:
        upload_job_listing_image(listing, form.cleaned_data[image_type], image_type)
    except ImageProcessingError as exc:
        return JsonResponse({'success': False, 'message': f'Failed to upload {image_type}: {exc}'}, status=500)

    return JsonResponse({
        'success': True,
        'message': _('%(label)s uploaded successfully.') % {'label': label},
        'data': _listing_images_data(listing),
    })


@company_required
@require_http_methods(['PATCH'])
def listing_image_toggle(request, pk):
    listing, error = _owned_listing_or_error(request, pk)
    if error:
        return error

    form = ImageToggleForm(request_data(request))
    if not form.is_valid():
        errors = form_errors(form)
        return JsonResponse({
            'success': False,
            'message': next(iter(errors.values())),
            'errors': form_errors(form, first_only=False),
        }, status=422)

    listing.use_company_logo = form.cleaned_data['use_company_logo']
    listing.use_company_banner = form.cleaned_data['use_company_banner']
    listing.save(update_fields=['use_company_logo', 'use_company_banner', 'updated_at'])
    return JsonResponse({
        'success': True,
        'message': _('Image preferences updated successfully.'),
        'data': _listing_images_data(listing),
    })


# -------------------------
# Public
# -------------------------
def _public_listing_dict(listing):
    data = listing.to_dict()
    data['company'] = {
        'id': listing.company_id,
        'name': listing.company.name,
        'logo_url': listing.company.logo_url,
    }
    return data


@require_GET
def welcome(request):
    listings = (
        JobListing.objects.published()
        .filter(active_until__gt=timezone.now())
        .select_related('company')
        .order_by('-created_at')[:10]
    )
    return render_page(request, 'welcome', {
        'jobListings': [_public_listing_dict(listing) for listing in listings],
    })


@require_GET
def job_detail(request, pk):
    listing = get_object_or_404(JobListing.objects.published().select_related('company'), pk=pk)
    applicant = getattr(request, 'applicant', None)
    has_applied = bool(applicant) and listing.applications.filter(applicant=applicant).exists()
    return render_page(request, 'jobs/show', {
        'jobListing': _labelled_listing(listing),
        'hasApplied': has_applied,
    })


@applicant_required
@require_POST
def apply(request, pk):
    listing = JobListing.objects.published().filter(pk=pk).first()
    if listing is None:
        raise Http404("Job listing not found")

    applicant = request.applicant
    fallback = reverse('jobs:detail', args=[listing.pk])
    already_applied = {'job_listing': _('You have already applied for this job.')}
    if listing.applications.filter(applicant=applicant).exists():
        return validation_failed(request, already_applied, fallback)

    form = JobApplicationForm(request.POST, request.FILES)
    if not form.is_valid():
        return validation_failed(request, form, fallback)

    try:
        with transaction.atomic():
            application = JobApplication.objects.create(
                job_listing=listing,
                applicant=applicant,
                cv=form.cleaned_data['cv'],
                cover_letter=form.cleaned_data.get('cover_letter'),
            )
    except IntegrityError:
        return validation_failed(request, already_applied, fallback)

    logger.info("Applicant %s applied for job listing %s (application %s)", applicant.pk, listing.pk, application.pk)
    messages.success(request, _('Your application has been submitted.'))
    return redirect(fallback)


@applicant_required
@require_GET
def applicant_dashboard(request):
    applications = (
        request.applicant.applications
        .select_related('job_listing', 'job_listing__company')
        .order_by('-applied_at')
    )
    return render_page(request, 'applicant/dashboard', {
        'applicant': request.applicant.to_dict(),
        'applications': [application.to_dict() for application in applications],
    })
