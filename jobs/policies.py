# jobs/policies.py
from django.core.exceptions import PermissionDenied


class Response:
    def __init__(self, allowed, message=None):
        self.allowed = allowed
        self.message = message

    def __bool__(self):
        return self.allowed

    @classmethod
    def allow(cls):
        return cls(True)

    @classmethod
    def deny(cls, message):
        return cls(False, message)


class JobListingPolicy:
    """What a company may do with a job listing."""

    def view(self, company, listing):
        return Response.allow()

    def create(self, company, listing=None):
        return Response.allow()

    def edit(self, company, listing):
        return self._owns(company, listing)

    def update(self, company, listing):
        return self._owns(company, listing)

    def delete(self, company, listing):
        return self._owns(company, listing)

    @staticmethod
    def _owns(company, listing):
        if company is not None and listing.company_id == company.pk:
            return Response.allow()
        return Response.deny('You do not own this job.')


job_listing_policy = JobListingPolicy()


def authorize(company, ability, listing=None):
    response = getattr(job_listing_policy, ability)(company, listing)
    if not response:
        raise PermissionDenied(response.message)
    return response
