"""
Custom exceptions for the Planner Assistant
"""
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler


class PlannerAuthenticationFailed(APIException):
    """Raised when the planner bearer token is missing or wrong"""
    status_code = 401
    default_detail = 'Unauthorized'
    default_code = 'unauthorized'


class CoupleNotFound(APIException):
    """Raised when a planner couple is not found"""
    status_code = 404
    default_detail = 'Couple not found'
    default_code = 'couple_not_found'


class VendorNotFound(APIException):
    """Raised when a shared vendor is not found for the couple"""
    status_code = 404
    default_detail = 'Vendor not found'
    default_code = 'vendor_not_found'


class CoupleParseError(ValueError):
    """Raised when free text cannot be turned into a couple record"""


def api_exception_handler(exc, context):
    """
    Render API errors as ``{"success": false, "error": "..."}``.

    Wraps DRF's default handler so status codes and headers are unchanged.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    if detail is None:
        detail = response.data
    response.data = {'success': False, 'error': detail}
    return response
