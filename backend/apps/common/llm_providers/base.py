"""
Base LLM Provider interface
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Union


@dataclass(frozen=True)
class ToolCall:
    """A model's request to run one tool. ``id`` is assigned by the provider."""
    id: str
    name: str
    input: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultBlock:
    """Model-visible outcome of one ToolCall, correlated by ``tool_call_id``."""
    tool_call_id: str
    content: Dict[str, Any]


@dataclass
class ChatMessage:
    """
    One conversation turn in provider-neutral form.

    ``content`` is plain text, the tool calls of an assistant turn, or the
    tool results sent back in a user turn. ``text`` holds any prose the model
    produced alongside its tool calls; it is replayed to the model, never
    shown to the user.
    """
    role: str
    content: Union[str, List[ToolCall], List[ToolResultBlock]]
    text: str = ""


@dataclass
class ModelTurn:
    """Complete (non-streamed) model response."""
    text: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    stop_reason: Optional[str] = None

    @property
    def is_natural_stop(self) -> bool:
        return self.stop_reason == "end_turn"


# Normalised stop reasons shared by all providers
STOP_END_TURN = "end_turn"
STOP_TOOL_USE = "tool_use"
STOP_MAX_TOKENS = "max_tokens"


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    @abstractmethod
    async def generate(
        self,
        messages: list[dict],
        system_prompt: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        **kwargs
    ) -> str:
        """
        Non-streaming chat completion. Returns full response text.

        Args:
            messages: List of message dicts with 'role' and 'content'
            system_prompt: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Provider-specific options

        Returns:
            Generated text content
        """

    @abstractmethod
    async def complete_with_tools(
        self,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        messages: List[ChatMessage],
        max_tokens: int = 2048,
        **kwargs
    ) -> ModelTurn:
        """
        One blocking model call that may request tools.

        Each tool dict follows the Anthropic format:
        {
            "name": "tool_name",
            "description": "...",
            "input_schema": { JSON Schema }
        }

        Raises on any transport, auth or provider failure; nothing partial
        is returned.
        """

    @abstractmethod
    def stream_with_tools(
        self,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        messages: List[ChatMessage],
        max_tokens: int = 2048,
        **kwargs
    ) -> AsyncIterator[str]:
        """
        Stream the model's answer as text fragments.

        The iterator is finite and cannot be restarted; it ends once the
        provider has delivered the final message. Tool definitions are sent
        so the model keeps the same view of its capabilities, but any tool
        requests in the streamed turn are not executed.
        """
