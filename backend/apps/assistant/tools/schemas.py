"""
Tool Schema Definitions for the planner assistant.

Tool set:
  get_couples_list           - PlannerService.list_couples()
  get_couple_vendor_summary  - PlannerService.vendor_summary()
  parse_couple               - CoupleParseService.parse()
  open_couple_modal          - client action, editor pre-filled
  navigate_to                - client action, allow-listed planner URLs
  mark_vendor_booked         - PlannerService.mark_vendor_booked() + navigate
"""

from .inputs import (
    GetCoupleVendorSummaryInput,
    GetCouplesListInput,
    MarkVendorBookedInput,
    NavigateToInput,
    OpenCoupleModalInput,
    ParseCoupleInput,
)
from .registry import ToolDefinition, ToolRegistry


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

GET_COUPLES_LIST = ToolDefinition(
    name="get_couples_list",
    description=(
        "Get the list of all couples managed by this planner, "
        "including their wedding dates and venue info."
    ),
    input_schema={
        "type": "object",
        "properties": {},
        "required": [],
    },
    input_model=GetCouplesListInput,
    display_name="List Couples",
)


GET_COUPLE_VENDOR_SUMMARY = ToolDefinition(
    name="get_couple_vendor_summary",
    description=(
        "Get the vendor summary for a specific couple, with each vendor's review "
        "status, to understand what is still pending vs confirmed."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "couple_id": {
                "type": "string",
                "description": "The couple_id field from get_couples_list (NOT share_link_id)",
            },
        },
        "required": ["couple_id"],
    },
    input_model=GetCoupleVendorSummaryInput,
    display_name="Vendor Summary",
)


PARSE_COUPLE = ToolDefinition(
    name="parse_couple",
    description="Parse a natural language description of a new couple and extract their details.",
    input_schema={
        "type": "object",
        "properties": {
            "description": {
                "type": "string",
                "description": "Natural language description of the couple and their wedding details",
            },
        },
        "required": ["description"],
    },
    input_model=ParseCoupleInput,
    display_name="Parse Couple",
)


OPEN_COUPLE_MODAL = ToolDefinition(
    name="open_couple_modal",
    description=(
        "Instruct the frontend to open the Add Couple modal pre-filled with the "
        "given couple data for review before saving."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "coupleData": {
                "type": "object",
                "description": "The parsed couple operation to pre-fill the modal with",
                "properties": {
                    "action": {"type": "string", "enum": ["create", "update"]},
                    "couple_data": {
                        "type": "object",
                        "properties": {
                            "couple_names": {"type": "string"},
                            "couple_email": {"type": "string"},
                            "wedding_date": {"type": "string"},
                            "wedding_location": {"type": "string"},
                            "venue_name": {"type": "string"},
                            "notes": {"type": "string"},
                        },
                    },
                    "confidence": {"type": "number"},
                    "warnings": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["action", "couple_data"],
            },
        },
        "required": ["coupleData"],
    },
    input_model=OpenCoupleModalInput,
    display_name="Open Couple Editor",
)


NAVIGATE_TO = ToolDefinition(
    name="navigate_to",
    description=(
        "Instruct the frontend to navigate to a specific page. "
        "Use share_link_id from get_couples_list to build couple detail URLs."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "description": (
                    "URL to navigate to. Options: /planners, /planners?view=couples, "
                    "/planners?view=vendors, /planners?view=settings, or "
                    "/planners/couples/{share_link_id} to go to a specific couple's page "
                    "(optionally with ?tab=overview or ?tab=vendors)."
                ),
            },
        },
        "required": ["url"],
    },
    input_model=NavigateToInput,
    display_name="Navigate",
)


MARK_VENDOR_BOOKED = ToolDefinition(
    name="mark_vendor_booked",
    description=(
        "Mark an approved vendor as Booked & Confirmed. Only use when the planner "
        "explicitly says they have confirmed the booking. Also navigates to the "
        "couple's vendor team."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "couple_id": {
                "type": "string",
                "description": "The couple_id (UUID) from get_couple_vendor_summary",
            },
            "vendor_id": {
                "type": "string",
                "description": "The vendor_id (UUID) from get_couple_vendor_summary",
            },
            "share_link_id": {
                "type": "string",
                "description": "The couple's share_link_id for navigation",
            },
        },
        "required": ["couple_id", "vendor_id", "share_link_id"],
    },
    input_model=MarkVendorBookedInput,
    display_name="Mark Vendor Booked",
)


# ---------------------------------------------------------------------------
# All tool definitions for registration
# ---------------------------------------------------------------------------

TOOL_SCHEMAS = [
    GET_COUPLES_LIST,
    GET_COUPLE_VENDOR_SUMMARY,
    PARSE_COUPLE,
    OPEN_COUPLE_MODAL,
    NAVIGATE_TO,
    MARK_VENDOR_BOOKED,
]


def register_all_tools():
    """Register all tool definitions with the ToolRegistry."""
    for tool in TOOL_SCHEMAS:
        ToolRegistry.register(tool)
