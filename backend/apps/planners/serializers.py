"""
Planner serializers
"""
from rest_framework import serializers

from .models import PlannerCouple, SharedVendor
from .services import normalize_vendor_status


class PlannerCoupleSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlannerCouple
        fields = [
            'id',
            'share_link_id',
            'couple_names',
            'couple_email',
            'wedding_date',
            'wedding_location',
            'venue_name',
            'notes',
            'last_activity',
            'created_at',
        ]
        read_only_fields = fields


class SharedVendorSerializer(serializers.ModelSerializer):
    """Shared vendor with the couple's review status as shown to planners"""

    status = serializers.SerializerMethodField()

    class Meta:
        model = SharedVendor
        fields = [
            'id',
            'vendor_name',
            'vendor_type',
            'contact_name',
            'email',
            'phone',
            'website',
            'planner_note',
            'couple_status',
            'couple_note',
            'status',
            'created_at',
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return normalize_vendor_status(obj.couple_status)


class PlannerLoginSerializer(serializers.Serializer):
    password = serializers.CharField(allow_blank=True, trim_whitespace=False)


class CoupleParseRequestSerializer(serializers.Serializer):
    text = serializers.CharField(
        error_messages={
            'required': 'Text is required',
            'blank': 'Text is required',
        }
    )
