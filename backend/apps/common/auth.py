"""
Shared planner authentication.

Planners authenticate with a single shared password (PLANNER_PASSWORD). The
login endpoint hands the password back as a bearer token, and every planner
API call sends it as ``Authorization: Bearer <token>``.

Used by both the async streaming view (which bypasses DRF's authentication
layer) and the DRF views via ``IsPlanner``.
"""
import hmac
from typing import Optional

from django.conf import settings
from rest_framework.permissions import BasePermission

from apps.common.exceptions import PlannerAuthenticationFailed


def get_bearer_token(request) -> Optional[str]:
    """Return the bearer token from the Authorization header, if any."""
    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    if not auth_header.startswith('Bearer '):
        return None
    token = auth_header.split(' ', 1)[1].strip()
    return token or None


def check_planner_password(candidate: Optional[str]) -> bool:
    """Constant-time comparison against the configured planner password."""
    expected = getattr(settings, 'PLANNER_PASSWORD', '')
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode('utf-8'), expected.encode('utf-8'))


def authenticate_planner(request) -> Optional[str]:
    """Authenticate a raw Django request against the planner password.

    Returns the accepted token, or None if the credential is missing or wrong.
    """
    token = get_bearer_token(request)
    if check_planner_password(token):
        return token
    return None


class IsPlanner(BasePermission):
    """DRF permission: request carries the planner bearer token.

    Raises instead of returning False so DRF answers 401 rather than 403.
    """

    def has_permission(self, request, view):
        if authenticate_planner(request) is None:
            raise PlannerAuthenticationFailed()
        return True
