# accounts/middleware.py
from .guards import GUARD_CLASSES, apply_queued_cookies, get_guard


class GuardMiddleware:
    """
    Resolves every guard's principal onto the request (``request.company``,
    ``request.applicant``) and writes remember-me cookies queued by the
    guards onto the response. Must run after SessionMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        for name in GUARD_CLASSES:
            setattr(request, name, get_guard(request, name).user())

        response = self.get_response(request)
        return apply_queued_cookies(request, response)
