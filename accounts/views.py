# accounts/views.py
"""
Authentication screens. Every view except registration serves both
principal types; the urlconf passes the guard name as the ``guard`` kwarg.
"""
import logging

from django.http import HttpResponseForbidden
from django.middleware.csrf import rotate_token
from django.shortcuts import redirect
from django.urls import reverse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from jobboard.inertia import (
    flash_status, pop_status, redirect_back, render_page, request_data, validation_failed,
)

from . import signals
from .actions import create_applicant, create_company, reset_password
from .decorators import (
    INTENDED_URL_SESSION_KEY, auth_required, guest_only, signed_url_required, throttle,
)
from .forms import (
    ForgotPasswordForm, LoginForm, NewPasswordForm, RegisterApplicantForm, RegisterCompanyForm,
)
from .guards import get_guard, guard_config
from .notifications import send_verification_email
from .passwords import PASSWORD_RESET, RESET_LINK_SENT, STATUS_MESSAGES, broker_for_guard
from .verification import hash_matches

logger = logging.getLogger(__name__)


def _redirect_intended(request, default):
    return redirect(request.session.pop(INTENDED_URL_SESSION_KEY, None) or default)


# -------------------------
# Registration
# -------------------------
@guest_only('company')
@require_http_methods(['GET', 'POST'])
def register_company(request):
    if request.method == 'GET':
        return render_page(request, 'company/auth/register')

    form = RegisterCompanyForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, 'accounts:company_register')

    company = create_company(form.cleaned_data)
    get_guard(request, 'company').login(company)
    return redirect(guard_config('company')['home'])


@guest_only('applicant')
@require_http_methods(['GET', 'POST'])
def register_applicant(request):
    if request.method == 'GET':
        return render_page(request, 'applicant/auth/register')

    form = RegisterApplicantForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, 'accounts:applicant_register')

    applicant = create_applicant(form.cleaned_data)
    get_guard(request, 'applicant').login(applicant)
    return redirect(guard_config('applicant')['verification_notice'])


# -------------------------
# Sessions
# -------------------------
@guest_only()
@require_http_methods(['GET', 'POST'])
def login(request, guard):
    if request.method == 'GET':
        return render_page(request, f'{guard}/auth/login', {
            'canResetPassword': True,
            'status': pop_status(request),
        })

    form = LoginForm(request_data(request), request=request, guard=guard)
    if not form.authenticate():
        return validation_failed(request, form, guard_config(guard)['login'])

    return _redirect_intended(request, guard_config(guard)['home'])


@auth_required()
@require_POST
def logout(request, guard):
    get_guard(request, guard).logout()
    request.session.flush()
    rotate_token(request)
    return redirect(guard_config(guard)['login'])


# -------------------------
# Password reset
# -------------------------
@guest_only()
@require_http_methods(['GET', 'POST'])
def forgot_password(request, guard):
    fallback = f'accounts:{guard}_password_request'
    if request.method == 'GET':
        return render_page(request, f'{guard}/auth/forgot-password', {'status': pop_status(request)})

    form = ForgotPasswordForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, fallback)

    status = broker_for_guard(guard).send_reset_link({'email': form.cleaned_data['email']})
    if status != RESET_LINK_SENT:
        return validation_failed(request, {'email': str(STATUS_MESSAGES[status])}, fallback)

    flash_status(request, str(STATUS_MESSAGES[status]))
    return redirect_back(request, fallback)


@guest_only()
@require_GET
def reset_password_form(request, guard, token):
    return render_page(request, f'{guard}/auth/reset-password', {
        'email': request.GET.get('email'),
        'token': token,
    })


@guest_only()
@require_POST
def reset_password_store(request, guard):
    form = NewPasswordForm(request_data(request))
    if not form.is_valid():
        return validation_failed(request, form, guard_config(guard)['login'])

    status = broker_for_guard(guard).reset(form.cleaned_data, reset_password)
    if status != PASSWORD_RESET:
        return validation_failed(request, {'email': str(STATUS_MESSAGES[status])}, guard_config(guard)['login'])

    flash_status(request, str(STATUS_MESSAGES[status]))
    return redirect(guard_config(guard)['login'])


# -------------------------
# Email verification
# -------------------------
@auth_required()
@require_GET
def verification_notice(request, guard):
    if getattr(request, guard).has_verified_email():
        return _redirect_intended(request, guard_config(guard)['home'])
    return render_page(request, f'{guard}/auth/verify-email', {'status': pop_status(request)})


@auth_required()
@signed_url_required
@throttle(6, 1)
@require_GET
def verify_email(request, guard, pk, hash):
    user = getattr(request, guard)
    if str(user.pk) != str(pk) or not hash_matches(user, hash):
        return HttpResponseForbidden("This action is unauthorized.")

    if user.has_verified_email():
        onboarding = reverse(guard_config(guard)['onboarding']) + '?verified=1'
        return _redirect_intended(request, onboarding)

    if user.mark_email_as_verified():
        signals.verified.send(sender=type(user), guard=guard, user=user)
        logger.info("%s %s verified %s", guard, user.pk, user.email)

    return _redirect_intended(request, guard_config(guard)['home'])


@auth_required()
@throttle(6, 1)
@require_POST
def resend_verification(request, guard):
    user = getattr(request, guard)
    if user.has_verified_email():
        return _redirect_intended(request, guard_config(guard)['home'])

    send_verification_email(user)
    flash_status(request, 'verification-link-sent')
    return redirect_back(request, guard_config(guard)['verification_notice'])
