"""
Shared utilities for LLM interactions.

Eliminates duplicated JSON-parsing boilerplate across services.
"""
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def strip_markdown_fences(text: str) -> str:
    """
    Strip markdown code fences from LLM response text.

    Handles patterns like:
        ```json\n{...}\n```
        ```\n{...}\n```
    """
    text = text.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    return text


def parse_json_response(
    text: str,
    fallback: Any = None,
    description: str = "LLM JSON response",
) -> Any:
    """
    Parse a complete LLM response as JSON.

    Handles markdown code fences and returns ``fallback`` on parse failure.
    """
    try:
        return json.loads(strip_markdown_fences(text))
    except (json.JSONDecodeError, ValueError, IndexError) as e:
        logger.warning("Failed to parse %s: %s", description, e)
        return fallback
