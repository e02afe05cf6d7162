"""
Tool Executor: dispatches the model's tool calls to planner services.

All calls of one model turn run concurrently and the batch completes when
the slowest call does. Every call yields exactly one ToolResult, keyed by the
call id the model assigned; a failing call becomes an ``{"error": ...}``
payload for the model and never aborts its siblings.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from asgiref.sync import sync_to_async
from django.core.exceptions import ObjectDoesNotExist
from pydantic import ValidationError
from rest_framework.exceptions import APIException

from apps.common.llm_providers import ToolCall
from apps.planners.parsing import CoupleParseService
from apps.planners.services import PlannerService

from .actions import ACTION_NAVIGATE, ACTION_OPEN_COUPLE_MODAL, PendingAction, is_allowed_url
from .inputs import (
    TOOL_INPUTS,
    GetCoupleVendorSummaryInput,
    GetCouplesListInput,
    MarkVendorBookedInput,
    NavigateToInput,
    OpenCoupleModalInput,
    ParseCoupleInput,
    describe_validation_error,
)
from .registry import ToolRegistry, ToolResult

logger = logging.getLogger(__name__)

COUPLES_LIST_HINT = (
    "This list does NOT include vendor data. You MUST call get_couple_vendor_summary "
    "with each couple_id to get their vendor status. Never assume a couple has no "
    "vendors based on this list alone."
)


@dataclass
class ToolOutcome:
    """What a handler hands back: the model-visible output and an optional client action."""
    output: Dict[str, Any]
    action: Optional[PendingAction] = None


class ToolRejected(ValueError):
    """The call was well-formed but not permitted; the message goes to the model."""


# ---------------------------------------------------------------------------
# Tool dispatch functions
# ---------------------------------------------------------------------------

async def _execute_get_couples_list(params: GetCouplesListInput) -> ToolOutcome:
    couples = await sync_to_async(PlannerService.list_couples)()
    return ToolOutcome(output={'couples': couples, '_hint': COUPLES_LIST_HINT})


async def _execute_get_couple_vendor_summary(params: GetCoupleVendorSummaryInput) -> ToolOutcome:
    summary = await sync_to_async(PlannerService.vendor_summary)(params.couple_id)
    return ToolOutcome(output=summary)


async def _execute_parse_couple(params: ParseCoupleInput) -> ToolOutcome:
    operation = await CoupleParseService().parse(params.description)
    return ToolOutcome(output=operation.model_dump())


async def _execute_open_couple_modal(params: OpenCoupleModalInput) -> ToolOutcome:
    return ToolOutcome(
        output={'success': True, 'message': 'Modal will be opened on the frontend'},
        action=PendingAction(type=ACTION_OPEN_COUPLE_MODAL, payload=params.couple_data),
    )


async def _execute_navigate_to(params: NavigateToInput) -> ToolOutcome:
    if not is_allowed_url(params.url):
        raise ToolRejected(f"Navigation to {params.url} is not allowed")
    return ToolOutcome(
        output={'success': True, 'message': f"Will navigate to {params.url}"},
        action=PendingAction(type=ACTION_NAVIGATE, payload={'url': params.url}),
    )


async def _execute_mark_vendor_booked(params: MarkVendorBookedInput) -> ToolOutcome:
    vendor = await sync_to_async(PlannerService.mark_vendor_booked)(
        params.couple_id, params.vendor_id,
    )
    url = f"/planners/couples/{params.share_link_id}?tab=vendors"
    return ToolOutcome(
        output={
            'success': True,
            'message': 'Vendor marked as Booked & Confirmed. Navigating to vendor team.',
        },
        action=PendingAction(
            type=ACTION_NAVIGATE,
            payload={
                'url': url,
                'bookingContext': {
                    'vendorId': str(vendor.id),
                    'vendorName': vendor.vendor_name,
                },
            },
        ),
    )


_DISPATCH_TABLE: Dict[str, Callable] = {
    'get_couples_list': _execute_get_couples_list,
    'get_couple_vendor_summary': _execute_get_couple_vendor_summary,
    'parse_couple': _execute_parse_couple,
    'open_couple_modal': _execute_open_couple_modal,
    'navigate_to': _execute_navigate_to,
    'mark_vendor_booked': _execute_mark_vendor_booked,
}

# Every dispatch entry needs an input model, and vice versa
if set(_DISPATCH_TABLE) != set(TOOL_INPUTS):
    raise ImportError(
        "Tool dispatch table and input models disagree: "
        f"{sorted(set(_DISPATCH_TABLE) ^ set(TOOL_INPUTS))}"
    )


# ---------------------------------------------------------------------------
# ToolExecutor
# ---------------------------------------------------------------------------

class ToolExecutor:
    """Executes tool calls by dispatching to planner services."""

    @classmethod
    async def execute(cls, call: ToolCall) -> ToolResult:
        """
        Execute a single tool call. Never raises for tool-level failures.

        Args:
            call: Tool call as requested by the model

        Returns:
            ToolResult with the same call id, carrying output or an error
        """
        tool = ToolRegistry.get(call.name)
        dispatch_fn = _DISPATCH_TABLE.get(call.name)
        if tool is None or dispatch_fn is None:
            logger.warning("tool_unknown", extra={'tool_name': call.name, 'call_id': call.id})
            return ToolResult(
                call_id=call.id,
                tool_name=call.name,
                success=False,
                error=f"Unknown tool: {call.name}",
            )

        try:
            params = tool.input_model.model_validate(call.input or {})
        except ValidationError as e:
            logger.warning(
                "tool_input_invalid",
                extra={'tool_name': call.name, 'call_id': call.id, 'errors': e.error_count()},
            )
            return ToolResult(
                call_id=call.id,
                tool_name=call.name,
                success=False,
                error=describe_validation_error(call.name, e),
            )

        started = time.monotonic()
        try:
            outcome = await dispatch_fn(params)
        except (ValueError, ObjectDoesNotExist, APIException) as e:
            # User-caused errors (bad id, rejected URL, unparseable text)
            logger.warning("Tool call rejected: %s: %s", call.name, e)
            return ToolResult(
                call_id=call.id,
                tool_name=call.name,
                success=False,
                error=str(e) or "Tool execution failed",
            )
        except Exception as e:
            logger.exception(
                "tool_execution_failed",
                extra={
                    'tool_name': call.name,
                    'call_id': call.id,
                    'error_type': type(e).__name__,
                },
            )
            return ToolResult(
                call_id=call.id,
                tool_name=call.name,
                success=False,
                error=str(e) or "Tool execution failed",
            )

        logger.info(
            "tool_execution_completed",
            extra={
                'tool_name': call.name,
                'call_id': call.id,
                'has_action': outcome.action is not None,
                'duration_ms': int((time.monotonic() - started) * 1000),
            },
        )
        return ToolResult(
            call_id=call.id,
            tool_name=call.name,
            success=True,
            output=outcome.output,
            action=outcome.action,
        )

    @classmethod
    async def execute_batch(cls, calls: List[ToolCall]) -> List[ToolResult]:
        """
        Run every call concurrently and wait for all of them.

        Results come back in the order of ``calls``; each is tagged with its
        call id regardless of completion order.
        """
        if not calls:
            return []
        return list(await asyncio.gather(*(cls.execute(call) for call in calls)))
