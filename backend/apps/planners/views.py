"""
Planner API views

Planners sign in with the shared password and reuse it as a bearer token
for every other endpoint here and for the assistant stream.
"""
import logging

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.common.auth import IsPlanner, check_planner_password
from apps.common.exceptions import CoupleParseError

from .models import PlannerCouple
from .parsing import CoupleParseService
from .serializers import (
    CoupleParseRequestSerializer,
    PlannerCoupleSerializer,
    PlannerLoginSerializer,
    SharedVendorSerializer,
)
from .services import PlannerService

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def planner_auth_view(request):
    """
    Exchange the planner password for a bearer token.

    POST /api/planners/auth/
    {"password": "..."}
    """
    serializer = PlannerLoginSerializer(data=request.data)
    password = serializer.validated_data['password'] if serializer.is_valid() else None

    if not check_planner_password(password):
        logger.info("planner_login_rejected")
        return Response(
            {'authenticated': False, 'error': 'Invalid password. Please try again.'},
            status=status.HTTP_401_UNAUTHORIZED,
        )

    return Response({
        'authenticated': True,
        'message': 'Authentication successful',
        'token': password,
    })


@api_view(['GET'])
@permission_classes([IsPlanner])
def couples_list_view(request):
    """GET /api/planners/couples/"""
    couples = PlannerCouple.objects.filter(is_active=True).order_by('-created_at')
    return Response({
        'success': True,
        'data': PlannerCoupleSerializer(couples, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsPlanner])
def couple_vendors_view(request, couple_id):
    """GET /api/planners/couples/<couple_id>/vendors/"""
    vendors = PlannerService.list_vendors(couple_id)
    return Response({
        'success': True,
        'data': SharedVendorSerializer(vendors, many=True).data,
    })


@api_view(['POST'])
@permission_classes([IsPlanner])
def couple_parse_view(request):
    """
    Parse couple details out of free text.

    POST /api/planners/couples/parse/
    {"text": "Sarah and Mike, 14 Sept 2026 at La Vie Estate"}
    """
    serializer = CoupleParseRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'success': False, 'error': 'Text is required'},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        result = async_to_sync(CoupleParseService().parse_all)(serializer.validated_data['text'])
    except CoupleParseError as e:
        return Response(
            {'success': False, 'error': str(e)},
            status=status.HTTP_502_BAD_GATEWAY,
        )
    except Exception:
        logger.exception("couple_parse_failed")
        return Response(
            {'success': False, 'error': 'Failed to parse couple information'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return Response({'success': True, 'data': result.model_dump()})
