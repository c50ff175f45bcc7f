# jobboard/inertia.py
"""
Server side of the page bridge.

Every page view returns a page object ``{component, props, url, version}``.
Full browser loads receive ``templates/app.html`` with the page object
embedded via ``json_script``; client-side visits (``X-Inertia`` header)
receive the same object as JSON.
"""
import json
import logging

from django.conf import settings
from django.contrib import messages
from django.core.exceptions import BadRequest, NON_FIELD_ERRORS
from django.http import HttpResponseRedirect, JsonResponse, QueryDict
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import get_language, gettext as _

from .middleware import available_locales

logger = logging.getLogger(__name__)

ERRORS_SESSION_KEY = '_errors'
STATUS_SESSION_KEY = '_status'


def is_inertia(request):
    return bool(request.headers.get('X-Inertia'))


def expects_json(request):
    """True for API style callers (not for page-bridge visits)."""
    if is_inertia(request):
        return False
    accept = request.headers.get('Accept', '')
    first = accept.split(',')[0].strip().lower()
    if '/json' in first or '+json' in first:
        return True
    is_ajax = request.headers.get('X-Requested-With') == 'XMLHttpRequest'
    return is_ajax and first in ('', '*/*')


def request_data(request):
    """
    Body parameters for any method: JSON bodies, form posts, and
    urlencoded PUT/PATCH/DELETE bodies (which Django leaves unparsed).
    """
    if request.content_type == 'application/json':
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except ValueError:
            raise BadRequest("Invalid JSON")
        return data if isinstance(data, dict) else {}
    if request.method == 'POST':
        return request.POST
    if request.content_type == 'application/x-www-form-urlencoded':
        return QueryDict(request.body, encoding=request.encoding)
    return QueryDict()


def form_errors(form, first_only=True):
    errors = {}
    for field, error_list in form.errors.items():
        key = 'general' if field == NON_FIELD_ERRORS else field
        errors[key] = error_list[0] if first_only else list(error_list)
    return errors


def shared_props(request):
    company = getattr(request, 'company', None)
    applicant = getattr(request, 'applicant', None)
    return {
        'name': settings.APP_NAME,
        'auth': {
            'company': company.to_dict() if company else None,
            'applicant': applicant.to_dict() if applicant else None,
        },
        'locale': {
            'current': get_language(),
            'available': available_locales(),
        },
        'flash': [
            {'level': message.level_tag, 'message': str(message)}
            for message in messages.get_messages(request)
        ],
        'errors': request.session.pop(ERRORS_SESSION_KEY, {}),
    }


def render_page(request, component, props=None, status=200):
    page = {
        'component': component,
        'props': {**shared_props(request), **(props or {})},
        'url': request.get_full_path(),
        'version': settings.ASSET_VERSION,
    }
    if is_inertia(request):
        response = JsonResponse(page, status=status)
        response['X-Inertia'] = 'true'
        response['Vary'] = 'X-Inertia'
        return response
    return render(request, 'app.html', {'page': page}, status=status)


def redirect_back(request, fallback='/'):
    referer = request.META.get('HTTP_REFERER')
    if referer and url_has_allowed_host_and_scheme(
        referer, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return HttpResponseRedirect(referer)
    return redirect(fallback)


def flash_status(request, status):
    request.session[STATUS_SESSION_KEY] = status


def pop_status(request):
    return request.session.pop(STATUS_SESSION_KEY, None)


def validation_failed(request, errors, fallback='/'):
    """
    Redirect back with the errors flashed into the session, or answer 422
    when the caller wants JSON. ``errors`` is a bound form or a dict.
    """
    if hasattr(errors, 'errors'):
        form = errors
        errors = form_errors(form)
        detailed = form_errors(form, first_only=False)
    else:
        detailed = {key: [message] for key, message in errors.items()}

    if expects_json(request):
        message = next(iter(errors.values()), _('The given data was invalid.'))
        return JsonResponse({'message': message, 'errors': detailed}, status=422)

    logger.debug("Validation failed for %s: %s", request.path, list(errors))
    request.session[ERRORS_SESSION_KEY] = errors
    return redirect_back(request, fallback)
