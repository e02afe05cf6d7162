"""
Tool Registry: typed tool contracts shared with the model.

Every tool the assistant can call is described once here, with the JSON
Schema the model sees and the pydantic model its input is validated
against. The same list is sent to the model on every call of a request,
in both the gathering and the streaming phase.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from apps.common.llm_providers import ToolResultBlock

from .actions import PendingAction

logger = logging.getLogger(__name__)


@dataclass
class ToolDefinition:
    """
    Definition of a tool available to the LLM.

    Attributes:
        name: Unique tool identifier (e.g. "get_couples_list")
        description: Human-readable description shown to LLM
        input_schema: JSON Schema for the tool input, sent verbatim
        input_model: pydantic model the raw input is validated against
        display_name: Short name for logs and the frontend
    """
    name: str
    description: str
    input_schema: Dict[str, Any]
    input_model: Type[BaseModel]
    display_name: str = ""

    def __post_init__(self):
        if not self.display_name:
            self.display_name = self.name.replace('_', ' ').title()

    def to_llm_tool(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


@dataclass
class ToolResult:
    """
    Outcome of one tool call, correlated to the request by ``call_id``.

    Successful calls carry ``output`` (and possibly an ``action`` for the
    client); failed calls carry ``error``. Either way the model sees a
    payload, so a failure is data for the next turn rather than an abort.
    """
    call_id: str
    tool_name: str
    success: bool
    output: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    action: Optional[PendingAction] = None

    @property
    def payload(self) -> Dict[str, Any]:
        if self.success:
            return self.output
        return {"error": self.error or "Tool execution failed"}

    def to_block(self) -> ToolResultBlock:
        return ToolResultBlock(tool_call_id=self.call_id, content=self.payload)


class ToolRegistry:
    """
    Registry of available tools.

    Tools are registered at import time (see schemas.py). The set is
    read-only once requests are being served.
    """

    _tools: Dict[str, ToolDefinition] = {}

    @classmethod
    def register(cls, tool: ToolDefinition):
        """Register a tool definition. Names must be unique."""
        existing = cls._tools.get(tool.name)
        if existing is not None and existing is not tool:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        cls._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    @classmethod
    def get(cls, name: str) -> Optional[ToolDefinition]:
        """Get a tool by name."""
        return cls._tools.get(name)

    @classmethod
    def all_tools(cls) -> List[ToolDefinition]:
        """Return all registered tools, in registration order."""
        return list(cls._tools.values())

    @classmethod
    def as_llm_tools(cls) -> List[Dict[str, Any]]:
        """Tool list in the shape the model APIs expect."""
        return [tool.to_llm_tool() for tool in cls._tools.values()]

    @classmethod
    def clear(cls):
        """Clear all registered tools (for testing)."""
        cls._tools.clear()
