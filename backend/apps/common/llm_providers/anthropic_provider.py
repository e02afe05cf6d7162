"""
Anthropic (Claude) LLM Provider
"""
import json
from typing import Any, AsyncIterator, Dict, List, Optional

from anthropic import AsyncAnthropic

from .base import (
    ChatMessage,
    LLMProvider,
    ModelTurn,
    ToolCall,
    ToolResultBlock,
)


def _system_param(system_prompt: Optional[str], use_prompt_caching: bool):
    """
    Build the ``system`` parameter, enabling ephemeral prompt caching for
    substantial prompts (>100 chars). Cache reads cost 10% of base input price.
    """
    if use_prompt_caching and system_prompt and len(system_prompt) > 100:
        return [
            {
                "type": "text",
                "text": system_prompt,
                "cache_control": {"type": "ephemeral"},
            }
        ]
    return system_prompt or ""


def to_anthropic_messages(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    """Convert provider-neutral turns into Messages API params."""
    converted = []
    for message in messages:
        if isinstance(message.content, str):
            converted.append({"role": message.role, "content": message.content})
            continue

        blocks: List[Dict[str, Any]] = []
        if message.text:
            blocks.append({"type": "text", "text": message.text})
        for block in message.content:
            if isinstance(block, ToolCall):
                blocks.append({
                    "type": "tool_use",
                    "id": block.id,
                    "name": block.name,
                    "input": block.input,
                })
            elif isinstance(block, ToolResultBlock):
                blocks.append({
                    "type": "tool_result",
                    "tool_use_id": block.tool_call_id,
                    "content": json.dumps(block.content, default=str),
                })
        converted.append({"role": message.role, "content": blocks})
    return converted


class AnthropicProvider(LLMProvider):
    """Anthropic Claude implementation of LLM provider"""

    def __init__(self, api_key: str, model: str = "claude-haiku-4-5"):
        super().__init__(api_key, model)
        self.client = AsyncAnthropic(api_key=api_key)

    async def generate(
        self,
        messages: list[dict],
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        use_prompt_caching: bool = True,
        **kwargs
    ) -> str:
        """
        Non-streaming chat completion from Anthropic.

        Args:
            messages: List of message dicts with 'role' and 'content'
            system_prompt: Optional system prompt
            model: Optional model override
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            use_prompt_caching: Enable ephemeral prompt caching (default True).

        Returns:
            Generated text content
        """
        if not messages:
            raise ValueError("At least one message is required")

        response = await self.client.messages.create(
            model=model or self.model,
            messages=messages,
            system=_system_param(system_prompt, use_prompt_caching),
            max_tokens=max_tokens,
            temperature=temperature,
            **kwargs
        )

        return "".join(
            block.text for block in response.content if block.type == "text"
        )

    async def complete_with_tools(
        self,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        messages: List[ChatMessage],
        max_tokens: int = 2048,
        use_prompt_caching: bool = True,
        **kwargs
    ) -> ModelTurn:
        if not messages:
            raise ValueError("At least one message is required for Anthropic API")

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            system=_system_param(system_prompt, use_prompt_caching),
            tools=tools,
            messages=to_anthropic_messages(messages),
            **kwargs
        )

        texts = []
        tool_calls = []
        for block in response.content:
            if block.type == "text":
                texts.append(block.text)
            elif block.type == "tool_use":
                tool_calls.append(ToolCall(id=block.id, name=block.name, input=dict(block.input or {})))

        return ModelTurn(
            text="\n".join(texts),
            tool_calls=tool_calls,
            stop_reason=response.stop_reason,
        )

    async def stream_with_tools(
        self,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        messages: List[ChatMessage],
        max_tokens: int = 2048,
        use_prompt_caching: bool = True,
        **kwargs
    ) -> AsyncIterator[str]:
        if not messages:
            raise ValueError("At least one message is required for Anthropic API")

        async with self.client.messages.stream(
            model=self.model,
            max_tokens=max_tokens,
            system=_system_param(system_prompt, use_prompt_caching),
            tools=tools,
            messages=to_anthropic_messages(messages),
            **kwargs
        ) as stream:
            async for text in stream.text_stream:
                yield text
            # Surfaces any error raised after the last text delta
            await stream.get_final_message()
