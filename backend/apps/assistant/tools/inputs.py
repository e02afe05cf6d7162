"""
Validated tool inputs, one model per tool, keyed by tool name.

The executor looks the model up by the name the LLM used and validates the
raw input before dispatching, so handlers only ever see well-formed input.
"""
from typing import Any, Dict, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ToolInput(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)


class GetCouplesListInput(ToolInput):
    pass


class GetCoupleVendorSummaryInput(ToolInput):
    couple_id: str = Field(min_length=1)


class ParseCoupleInput(ToolInput):
    description: str = Field(min_length=1)


class OpenCoupleModalInput(ToolInput):
    # Forwarded to the client as-is, so no whitespace stripping on its keys
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=False)

    couple_data: Dict[str, Any] = Field(alias='coupleData')


class NavigateToInput(ToolInput):
    url: str = Field(min_length=1)


class MarkVendorBookedInput(ToolInput):
    couple_id: str = Field(min_length=1)
    vendor_id: str = Field(min_length=1)
    share_link_id: str = Field(min_length=1, pattern=r'^[a-zA-Z0-9_-]+$')


TOOL_INPUTS: Dict[str, Type[ToolInput]] = {
    'get_couples_list': GetCouplesListInput,
    'get_couple_vendor_summary': GetCoupleVendorSummaryInput,
    'parse_couple': ParseCoupleInput,
    'open_couple_modal': OpenCoupleModalInput,
    'navigate_to': NavigateToInput,
    'mark_vendor_booked': MarkVendorBookedInput,
}


def describe_validation_error(tool_name: str, error: ValidationError) -> str:
    """One-line, model-readable summary of what was wrong with the input."""
    problems = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item['loc']) or 'input'
        problems.append(f"{location}: {item['msg']}")
    return f"Invalid input for {tool_name}: " + '; '.join(problems)
