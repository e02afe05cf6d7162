"""
OpenAI LLM Provider
"""
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from openai import AsyncOpenAI

from .base import (
    STOP_END_TURN,
    STOP_MAX_TOKENS,
    STOP_TOOL_USE,
    ChatMessage,
    LLMProvider,
    ModelTurn,
    ToolCall,
    ToolResultBlock,
)

logger = logging.getLogger(__name__)

_FINISH_REASONS = {
    "stop": STOP_END_TURN,
    "tool_calls": STOP_TOOL_USE,
    "function_call": STOP_TOOL_USE,
    "length": STOP_MAX_TOKENS,
}


def to_openai_tools(tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert Anthropic tool format → OpenAI function format."""
    return [
        {
            "type": "function",
            "function": {
                "name": t["name"],
                "description": t.get("description", ""),
                "parameters": t.get("input_schema", {}),
            },
        }
        for t in tools
    ]


def to_openai_messages(system_prompt: Optional[str], messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    """
    Convert provider-neutral turns into Chat Completions messages.

    Tool results become one ``role=tool`` message each, in the order of the
    originating calls.
    """
    converted: List[Dict[str, Any]] = []
    if system_prompt:
        converted.append({"role": "system", "content": system_prompt})

    for message in messages:
        if isinstance(message.content, str):
            converted.append({"role": message.role, "content": message.content})
            continue

        calls = [b for b in message.content if isinstance(b, ToolCall)]
        results = [b for b in message.content if isinstance(b, ToolResultBlock)]
        if calls:
            converted.append({
                "role": "assistant",
                "content": message.text or None,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.name,
                            "arguments": json.dumps(call.input),
                        },
                    }
                    for call in calls
                ],
            })
        for result in results:
            converted.append({
                "role": "tool",
                "tool_call_id": result.tool_call_id,
                "content": json.dumps(result.content, default=str),
            })
    return converted


def _parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("openai_tool_arguments_unparseable", extra={"raw": raw[:200]})
        return {}
    return parsed if isinstance(parsed, dict) else {}


class OpenAIProvider(LLMProvider):
    """OpenAI implementation of LLM provider"""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        super().__init__(api_key, model)
        self.client = AsyncOpenAI(api_key=api_key)

    async def generate(
        self,
        messages: list[dict],
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        **kwargs
    ) -> str:
        """
        Non-streaming chat completion from OpenAI.

        Args:
            messages: List of message dicts with 'role' and 'content'
            system_prompt: Optional system prompt
            model: Optional model override
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Generated text content
        """
        if not messages:
            raise ValueError("At least one message is required")

        openai_messages = []
        if system_prompt:
            openai_messages.append({"role": "system", "content": system_prompt})
        openai_messages.extend(messages)

        response = await self.client.chat.completions.create(
            model=model or self.model,
            messages=openai_messages,
            max_tokens=max_tokens,
            temperature=temperature,
            **kwargs
        )

        if response.choices and response.choices[0].message.content:
            return response.choices[0].message.content
        return ""

    async def complete_with_tools(
        self,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        messages: List[ChatMessage],
        max_tokens: int = 2048,
        **kwargs
    ) -> ModelTurn:
        if not messages:
            raise ValueError("At least one message is required")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=to_openai_messages(system_prompt, messages),
            max_tokens=max_tokens,
            tools=to_openai_tools(tools),
            **kwargs
        )

        choice = response.choices[0] if response.choices else None
        if choice is None:
            return ModelTurn(stop_reason=STOP_END_TURN)

        tool_calls = [
            ToolCall(
                id=call.id,
                name=call.function.name,
                input=_parse_arguments(call.function.arguments),
            )
            for call in (choice.message.tool_calls or [])
        ]
        return ModelTurn(
            text=choice.message.content or "",
            tool_calls=tool_calls,
            stop_reason=_FINISH_REASONS.get(choice.finish_reason, choice.finish_reason),
        )

    async def stream_with_tools(
        self,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        messages: List[ChatMessage],
        max_tokens: int = 2048,
        **kwargs
    ) -> AsyncIterator[str]:
        if not messages:
            raise ValueError("At least one message is required")

        stream = await self.client.chat.completions.create(
            model=self.model,
            messages=to_openai_messages(system_prompt, messages),
            max_tokens=max_tokens,
            tools=to_openai_tools(tools),
            stream=True,
            **kwargs
        )

        async for chunk in stream:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content
