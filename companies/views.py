# companies/views.py
import logging

from django.contrib import messages
from django.http import Http404, JsonResponse
from django.middleware.csrf import rotate_token
from django.shortcuts import redirect
from django.utils.crypto import get_random_string
from django.utils.text import slugify
from django.utils.translation import gettext as _, gettext_lazy
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from accounts.decorators import auth_required, verified_required
from accounts.guards import get_guard
from accounts.models import Company
from jobboard.images import ImageProcessingError
from jobboard.inertia import (
    flash_status, pop_status, redirect_back, render_page, request_data, validation_failed,
)
from jobs.models import JobListing

from .forms import (
    IMAGE_UPLOAD_FORMS, CareerPageUpdateForm, CareerPageVideoForm, CompanyProfileUpdateForm,
    DeleteAccountForm, UpdatePasswordForm,
)
from .images import delete_company_image, upload_company_image, upload_career_page_image

logger = logging.getLogger(__name__)

IMAGE_MESSAGES = {
    'logo': {
        'uploaded': gettext_lazy('Logo uploaded successfully.'),
        'deleted': gettext_lazy('Logo deleted successfully.'),
        'upload_failed': 'Failed to upload logo',
        'delete_failed': 'Failed to delete logo',
    },
    'banner': {
        'uploaded': gettext_lazy('Banner uploaded successfully.'),
        'deleted': gettext_lazy('Banner deleted successfully.'),
        'upload_failed': 'Failed to upload banner',
        'delete_failed': 'Failed to delete banner',
    },
}


def company_required(view_func):
    """Signed in on the company guard with a verified email address."""
    return auth_required('company')(verified_required('company')(view_func))


# -------------------------
# Dashboard / onboarding
# -------------------------
@company_required
@require_GET
def dashboard(request):
    company = request.company
    return render_page(request, 'company/dashboard', {
        'company': company.to_dict(),
        'shouldShowOnboarding': company.should_show_onboarding(),
    })


@company_required
@require_GET
def profile_overview(request):
    company = request.company
    return render_page(request, 'company/profile-overview', {
        'company': company.to_dict(),
        'profileCompletion': {
            'percentage': company.get_profile_completion_percentage(),
            'steps': company.get_profile_completion_steps(),
            'missing': company.get_missing_profile_steps(),
            'completed': company.profile_completed,
        },
    })


@company_required
@require_http_methods(['GET', 'POST', 'PATCH'])
def details(request):
    company = request.company
    if request.method == 'GET':
        return render_page(request, 'company/profile', {
            'company': company.to_dict(),
            'shouldShowOnboarding': company.should_show_onboarding(),
            'status': pop_status(request),
        })

    form = CompanyProfileUpdateForm(request_data(request), instance=company)
    if not form.is_valid():
        return validation_failed(request, form, 'companies:details')

    form.save()
    company.update_profile_completion()
    flash_status(request, 'profile-updated')
    return redirect_back(request, 'companies:details')


# -------------------------
# Settings
# -------------------------
@company_required
@require_GET
def settings_index(request):
    return redirect('companies:settings_profile')


@company_required
@require_http_methods(['GET', 'PATCH', 'DELETE'])
def settings_profile(request):
    company = request.company

    if request.method == 'GET':
        return render_page(request, 'company/settings/profile', {
            'mustVerifyEmail': True,
            'status': pop_status(request),
        })

    if request.method == 'DELETE':
        form = DeleteAccountForm(request_data(request), user=company)
        if not form.is_valid():
            return validation_failed(request, form, 'companies:settings_profile')

        get_guard(request, 'company').logout()
        logger.info("Company %s deleted its account", company.pk)
        company.delete()
        request.session.flush()
        rotate_token(request)
        return redirect('/')

    form = CompanyProfileUpdateForm(request_data(request), instance=company)
    if not form.is_valid():
        return validation_failed(request, form, 'companies:settings_profile')

    form.save()
    company.update_profile_completion()
    return redirect('companies:settings_profile')


@company_required
@require_http_methods(['GET', 'PUT'])
def settings_password(request):
    company = request.company
    if request.method == 'GET':
        return render_page(request, 'company/settings/password', {
            'mustVerifyEmail': True,
            'status': pop_status(request),
        })

    form = UpdatePasswordForm(request_data(request), user=company)
    if not form.is_valid():
        return validation_failed(request, form, 'companies:settings_password')

    company.set_password(form.cleaned_data['password'])
    company.save(update_fields=['password', 'updated_at'])
    return redirect_back(request, 'companies:settings_password')


@company_required
@require_GET
def settings_appearance(request):
    return render_page(request, 'company/settings/appearance')


# -------------------------
# Career page
# -------------------------
def _unique_career_page_slug(company):
    base = slugify(company.name) or f'company-{company.pk}'
    slug = base
    counter = 1
    while Company.objects.filter(career_page_slug=slug).exclude(pk=company.pk).exists():
        slug = f'{base}-{counter}'
        counter += 1
    return slug


@company_required
@require_http_methods(['GET', 'POST'])
def career_page(request):
    company = request.company

    if request.method == 'GET':
        return render_page(request, 'company/career-page/edit', {
            'company': {
                'career_page_enabled': company.career_page_enabled,
                'career_page_slug': company.career_page_slug,
                'career_page_image': company.career_page_image_url,
                'career_page_videos': company.career_page_videos or [],
                'career_page_domain': company.career_page_domain,
                'spontaneous_application_enabled': company.spontaneous_application_enabled,
                'career_page_visibility': company.career_page_visibility,
            },
            'status': pop_status(request),
        })

    submitted = request_data(request)
    form = CareerPageUpdateForm(submitted, request.FILES, company=company)
    if not form.is_valid():
        return validation_failed(request, form, 'companies:career_page')

    # only touch what was sent; the booleans fall back to their defaults
    data = {
        field: value for field, value in form.cleaned_data.items()
        if field in submitted or f'{field}[]' in submitted
    }
    defaults = {
        'career_page_enabled': True,
        'spontaneous_application_enabled': False,
        'career_page_visibility': True,
    }
    for field, default in defaults.items():
        if data.get(field) is None:
            data[field] = default

    if data['career_page_enabled'] and not data.get('career_page_slug'):
        data['career_page_slug'] = _unique_career_page_slug(company)
    if not data['career_page_enabled']:
        data['career_page_slug'] = None

    data.pop('career_page_image', None)
    image = form.cleaned_data.get('career_page_image')
    if image:
        try:
            path = upload_career_page_image(company, image)
        except (ImageProcessingError, OSError):
            return validation_failed(
                request, {'career_page_image': _('Failed to upload image. Please try again.')},
                'companies:career_page',
            )
        if company.career_page_image and company.career_page_image != path:
            company.delete_career_page_image()
        data['career_page_image'] = path

    if data.get('career_page_videos') is None:
        data.pop('career_page_videos', None)

    for field, value in data.items():
        setattr(company, field, value)
    company.save()

    flash_status(request, 'career-page-updated')
    return redirect_back(request, 'companies:career_page')


@company_required
@require_http_methods(['DELETE'])
def career_page_image(request):
    request.company.delete_career_page_image()
    return redirect_back(request, 'companies:career_page')


@company_required
@require_POST
def career_page_video_add(request):
    company = request.company
    form = CareerPageVideoForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, 'companies:career_page')

    videos = list(company.career_page_videos or [])
    videos.append({
        'id': get_random_string(9),
        'url': form.cleaned_data['url'],
        'title': form.cleaned_data['title'] or 'YouTube Video',
    })
    company.career_page_videos = videos
    company.save(update_fields=['career_page_videos', 'updated_at'])

    flash_status(request, 'video-added')
    return redirect_back(request, 'companies:career_page')


@company_required
@require_http_methods(['DELETE'])
def career_page_video_remove(request, video_id):
    company = request.company
    videos = company.career_page_videos if isinstance(company.career_page_videos, list) else []
    company.career_page_videos = [
        video for video in videos
        if not (isinstance(video, dict) and video.get('id') == video_id)
    ]
    company.save(update_fields=['career_page_videos', 'updated_at'])

    flash_status(request, 'video-removed')
    return redirect_back(request, 'companies:career_page')


@company_required
@require_GET
def career_page_preview(request):
    company = request.company
    if not company.career_page_enabled:
        raise Http404("Career page is not enabled")

    listings = (
        JobListing.objects
        .filter(company=company)
        .published()
        .active()
        .order_by('-created_at')
    )
    return render_page(request, 'company/career-page/preview', {
        'company': company.to_dict(),
        'jobListings': [listing.to_dict() for listing in listings],
    })


# -------------------------
# Branding images
# -------------------------
@company_required
@require_GET
def images(request):
    company = request.company
    return JsonResponse({
        'success': True,
        'data': {
            'logo': company.image_info('logo') if company.has_logo() else None,
            'banner': company.image_info('banner') if company.has_banner() else None,
        },
    })


@company_required
@require_http_methods(['POST', 'DELETE'])
def image(request, image_type):
    company = request.company
    wording = IMAGE_MESSAGES[image_type]

    if request.method == 'DELETE':
        try:
            deleted = delete_company_image(company, image_type)
        except OSError as exc:
            logger.error("Deleting company %s %s failed: %s", company.pk, image_type, exc)
            deleted = False
        if not deleted:
            return validation_failed(request, {image_type: wording['delete_failed']}, 'companies:profile')
        company.update_profile_completion()
        messages.success(request, wording['deleted'])
        return redirect_back(request, 'companies:profile')

    form = IMAGE_UPLOAD_FORMS[image_type](request.POST, request.FILES)
    if not form.is_valid():
        return validation_failed(request, form, 'companies:profile')

    try:
        upload_company_image(company, form.cleaned_data[image_type], image_type)
    except ImageProcessingError as exc:
        return validation_failed(request, {image_type: f"{wording['upload_failed']}: {exc}"}, 'companies:profile')

    company.update_profile_completion()
    messages.success(request, wording['uploaded'])
    return redirect_back(request, 'companies:profile')
