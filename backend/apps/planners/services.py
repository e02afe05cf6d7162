"""
Planner data services.

Synchronous ORM access used by the planner endpoints and, through
``sync_to_async``, by the assistant's tools. Each method returns plain
dicts shaped for the caller so no model instances leak into LLM payloads.
"""
import logging
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import CoupleNotFound, VendorNotFound

from .models import PlannerCouple, SharedVendor, VendorStatus

logger = logging.getLogger(__name__)

NOT_REVIEWED = 'Not Reviewed'

# Stored couple_status → label the assistant reasons about. "interested" and
# "pass" are the labels the couple workspace used before statuses were renamed.
_STATUS_LABELS = {
    VendorStatus.APPROVED: 'Approved',
    'interested': 'Approved',
    VendorStatus.BOOKED: 'Booked',
    VendorStatus.DECLINED: 'Declined',
    'pass': 'Declined',
}


def normalize_vendor_status(status: Optional[str]) -> str:
    """Map a stored couple_status to Approved / Booked / Declined / Not Reviewed."""
    if not status:
        return NOT_REVIEWED
    return _STATUS_LABELS.get(status, NOT_REVIEWED)


def serialize_couple(couple: PlannerCouple) -> Dict[str, Any]:
    return {
        'couple_id': str(couple.id),
        'share_link_id': couple.share_link_id,
        'couple_names': couple.couple_names,
        'couple_email': couple.couple_email,
        'wedding_date': couple.wedding_date.isoformat() if couple.wedding_date else None,
        'wedding_location': couple.wedding_location,
        'venue_name': couple.venue_name,
        'notes': couple.notes,
    }


def serialize_vendor_summary(vendor: SharedVendor) -> Dict[str, Any]:
    item = {
        'vendor_id': str(vendor.id),
        'name': vendor.vendor_name,
        'type': vendor.vendor_type,
        'status': normalize_vendor_status(vendor.couple_status),
    }
    # Notes only when present, so the model does not mention empty ones
    if vendor.planner_note:
        item['planner_note'] = vendor.planner_note
    if vendor.couple_note:
        item['couple_note'] = vendor.couple_note
    return item


class PlannerService:
    """Service for planner couples and their shared vendors"""

    @staticmethod
    def list_couples() -> List[Dict[str, Any]]:
        """Active couples, newest first."""
        couples = PlannerCouple.objects.filter(is_active=True).order_by('-created_at')
        return [serialize_couple(c) for c in couples]

    @staticmethod
    def get_couple(couple_id) -> PlannerCouple:
        try:
            return PlannerCouple.objects.get(id=couple_id, is_active=True)
        except (PlannerCouple.DoesNotExist, ValidationError, ValueError):
            # ValidationError: couple_id is not a UUID
            raise CoupleNotFound(f"Couple {couple_id} not found")

    @staticmethod
    def list_vendors(couple_id) -> List[SharedVendor]:
        couple = PlannerService.get_couple(couple_id)
        return list(couple.vendors.order_by('vendor_type', 'vendor_name'))

    @staticmethod
    def vendor_summary(couple_id) -> Dict[str, Any]:
        """Vendors shared with a couple, with normalised review status."""
        vendors = [serialize_vendor_summary(v) for v in PlannerService.list_vendors(couple_id)]
        return {'total': len(vendors), 'vendors': vendors}

    @staticmethod
    @transaction.atomic
    def mark_vendor_booked(couple_id, vendor_id) -> SharedVendor:
        """Planner confirmed the booking with a vendor the couple approved."""
        couple = PlannerService.get_couple(couple_id)
        try:
            vendor = couple.vendors.select_for_update().get(id=vendor_id)
        except (SharedVendor.DoesNotExist, ValidationError, ValueError):
            raise VendorNotFound(f"Vendor {vendor_id} not found for couple {couple_id}")

        vendor.couple_status = VendorStatus.BOOKED
        vendor.save(update_fields=['couple_status', 'updated_at'])

        couple.last_activity = timezone.now()
        couple.save(update_fields=['last_activity', 'updated_at'])

        logger.info(
            "vendor_marked_booked",
            extra={'couple_id': str(couple.id), 'vendor_id': str(vendor.id)},
        )
        return vendor

    @staticmethod
    def existing_couples_digest() -> List[Dict[str, Any]]:
        """Minimal view of active couples for duplicate detection while parsing."""
        return list(
            PlannerCouple.objects
            .filter(is_active=True)
            .values('id', 'couple_names', 'couple_email', 'wedding_date', 'venue_name')
        )
