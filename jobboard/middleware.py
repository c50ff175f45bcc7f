# jobboard/middleware.py
from django.conf import settings
from django.http import HttpResponse
from django.utils.cache import patch_vary_headers
from django.utils import translation

LOCALE_SESSION_KEY = 'locale'


def available_locales():
    return [code for code, _name in settings.LANGUAGES]


class SetLocaleMiddleware:
    """
    Pick the active language from ?locale=xx (remembered in the session)
    or from whatever was remembered earlier. Needs the session middleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        locale = request.GET.get('locale')
        if locale in available_locales():
            request.session[LOCALE_SESSION_KEY] = locale
        else:
            locale = request.session.get(LOCALE_SESSION_KEY)

        if locale not in available_locales():
            locale = settings.LANGUAGE_CODE

        translation.activate(locale)
        request.LANGUAGE_CODE = locale
        response = self.get_response(request)
        response.headers.setdefault('Content-Language', locale)
        return response


class InertiaMiddleware:
    """
    Protocol glue for client-side visits: asset version check and 303
    redirects after PUT/PATCH/DELETE so the client follows with a GET.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        is_visit = bool(request.headers.get('X-Inertia'))
        if is_visit and request.method == 'GET':
            version = request.headers.get('X-Inertia-Version', '')
            if version != settings.ASSET_VERSION:
                response = HttpResponse(status=409)
                response['X-Inertia-Location'] = request.build_absolute_uri()
                return response

        response = self.get_response(request)

        if is_visit:
            patch_vary_headers(response, ('X-Inertia',))
            if response.status_code == 302 and request.method in ('PUT', 'PATCH', 'DELETE'):
                response.status_code = 303
        return response
