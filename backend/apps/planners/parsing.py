"""
Couple parse service

Turns a planner's free-text description ("Sarah and Mike, 14 Sept 2026 at
La Vie Estate") into structured couple operations using the extraction model.
"""
import logging
import time
from typing import Optional

from asgiref.sync import sync_to_async
from pydantic import ValidationError

from apps.common.exceptions import CoupleParseError
from apps.common.llm_providers import LLMProvider, get_llm_provider, parse_json_response

from .prompts import get_couple_parse_prompt
from .schemas import CoupleParseResult, ParsedCoupleOperation
from .services import PlannerService

logger = logging.getLogger(__name__)


class CoupleParseService:
    """LLM-backed extraction of couple records from free text"""

    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider or get_llm_provider('extraction')

    async def parse_all(self, text: str) -> CoupleParseResult:
        """
        Extract every couple operation found in ``text``.

        Raises:
            CoupleParseError: empty input, or a model response that is not
                the expected JSON shape
        """
        if not text or not text.strip():
            raise CoupleParseError("Text is required")

        started = time.monotonic()
        existing = await sync_to_async(PlannerService.existing_couples_digest)()

        raw = await self.provider.generate(
            messages=[{"role": "user", "content": text}],
            system_prompt=get_couple_parse_prompt(existing),
            max_tokens=2048,
            temperature=0.2,
        )

        data = parse_json_response(raw, fallback=None, description="couple parse response")
        if not isinstance(data, dict) or not isinstance(data.get('operations'), list):
            raise CoupleParseError("Invalid AI response format")

        try:
            result = CoupleParseResult.model_validate(data)
        except ValidationError as e:
            logger.warning("couple_parse_validation_failed", extra={"errors": e.error_count()})
            raise CoupleParseError("Invalid AI response format") from e

        result.processing_time_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "couple_parse_completed",
            extra={
                "operations": len(result.operations),
                "clarifications": len(result.clarifications_needed),
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result

    async def parse(self, text: str) -> ParsedCoupleOperation:
        """First operation extracted from ``text``."""
        result = await self.parse_all(text)
        if not result.operations:
            raise CoupleParseError("Could not extract couple information from the description")
        return result.operations[0]
