# accounts/throttles.py
"""
Rate limits for the endpoints that create accounts or send email.

Rates live in settings.REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] under each
class's scope.
"""

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class RegistrationThrottle(AnonRateThrottle):
    scope = 'registration'


class LoginThrottle(AnonRateThrottle):
    """Per-IP limit on token requests."""
    scope = 'login'


class InvitationThrottle(UserRateThrottle):
    """
    Each invitation mails someone outside the workspace, so owners get a
    daily budget instead of the general user rate.
    """
    scope = 'invitation'

    def allow_request(self, request, view):
        if request.method != 'POST':
            return True
        return super().allow_request(request, view)
