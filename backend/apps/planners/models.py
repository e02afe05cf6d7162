"""
Planner models - couples managed by the planner and the vendors shared with them
"""
import uuid

from django.db import models

from apps.common.models import TimestampedModel, UUIDModel


def _new_share_link_id() -> str:
    return str(uuid.uuid4())


class VendorStatus(models.TextChoices):
    """Couple feedback on a shared vendor; booked is set by the planner."""
    APPROVED = 'approved', 'Approved'
    BOOKED = 'booked', 'Booked & Confirmed'
    DECLINED = 'declined', 'Not for us'


class PlannerCouple(UUIDModel, TimestampedModel):
    """
    A couple whose wedding the planner manages.

    ``share_link_id`` is the public token used in the couple's workspace URL
    (/planners/couples/{share_link_id}); it is never the primary key.
    """
    couple_names = models.CharField(max_length=255, help_text='e.g. "Sarah & Mike"')
    couple_email = models.EmailField(blank=True, null=True)
    wedding_date = models.DateField(blank=True, null=True)
    wedding_location = models.CharField(max_length=255, blank=True, null=True)
    venue_name = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True, help_text="Planner's private notes")
    share_link_id = models.CharField(max_length=64, unique=True, default=_new_share_link_id)
    is_active = models.BooleanField(default=True)
    last_activity = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'planner_couples'
        ordering = ['-created_at']

    def __str__(self):
        return self.couple_names


class SharedVendor(UUIDModel, TimestampedModel):
    """A vendor the planner has shared with one couple for review."""
    planner_couple = models.ForeignKey(
        PlannerCouple,
        on_delete=models.CASCADE,
        related_name='vendors',
    )
    vendor_name = models.CharField(max_length=255)
    vendor_type = models.CharField(max_length=100, help_text='Photographer, Florist, Venue, ...')
    contact_name = models.CharField(max_length=255, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    website = models.URLField(blank=True, null=True)
    planner_note = models.TextField(blank=True, null=True)
    couple_status = models.CharField(
        max_length=20,
        choices=VendorStatus.choices,
        blank=True,
        null=True,
    )
    couple_note = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'shared_vendors'
        ordering = ['vendor_type', 'vendor_name']

    def __str__(self):
        return f"{self.vendor_name} ({self.vendor_type})"
