# accounts/decorators.py
from functools import wraps

from django.core.cache import cache
from django.core.exceptions import PermissionDenied
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect
from django.utils.translation import gettext as _

from jobboard.inertia import expects_json

from .guards import get_guard, guard_config
from .verification import has_valid_signature

INTENDED_URL_SESSION_KEY = 'url.intended'


def auth_required(guard=None):
    """
    Only let principals signed in on ``guard`` through. Without an explicit
    guard the view's ``guard`` URL kwarg names it.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            guard_name = guard or kwargs['guard']
            if get_guard(request, guard_name).guest():
                if expects_json(request):
                    return JsonResponse({'message': _('Unauthenticated.')}, status=401)
                if request.method == 'GET':
                    request.session[INTENDED_URL_SESSION_KEY] = request.get_full_path()
                return redirect(guard_config(guard_name)['login'])
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def guest_only(guard=None):
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            guard_name = guard or kwargs['guard']
            if get_guard(request, guard_name).check():
                return redirect(guard_config(guard_name)['home'])
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def verified_required(guard=None):
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            guard_name = guard or kwargs['guard']
            user = get_guard(request, guard_name).user()
            if user is None or not user.has_verified_email():
                if expects_json(request):
                    return JsonResponse(
                        {'message': _('Your %(guard)s email address is not verified.') % {'guard': guard_name}},
                        status=403,
                    )
                return redirect(guard_config(guard_name)['verification_notice'])
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def signed_url_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not has_valid_signature(request):
            raise PermissionDenied(_('Invalid signature.'))
        return view_func(request, *args, **kwargs)
    return _wrapped


def throttle(max_attempts, minutes):
    """
    Allow ``max_attempts`` hits per ``minutes`` for one caller on one view.
    The caller is the first signed-in principal, else the client IP.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            key = 'throttle:%s:%s' % (view_func.__module__ + '.' + view_func.__name__, _caller_key(request))
            decay = minutes * 60
            cache.add(key, 0, decay)
            try:
                hits = cache.incr(key)
            except ValueError:
                cache.set(key, 1, decay)
                hits = 1
            if hits > max_attempts:
                response = HttpResponse(_('Too Many Attempts.'), status=429)
                response['Retry-After'] = str(decay)
                return response
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def _caller_key(request):
    for name in ('company', 'applicant'):
        user = getattr(request, name, None)
        if user is not None:
            return f'{name}:{user.pk}'
    return request.META.get('REMOTE_ADDR', '')
