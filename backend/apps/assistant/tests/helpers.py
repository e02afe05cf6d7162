"""
Shared fakes for assistant tests.
"""
import asyncio
import json
from typing import List, Optional

from apps.common.llm_providers import LLMProvider, ModelTurn, ToolCall


class ScriptedProvider(LLMProvider):
    """
    LLM provider that replays scripted turns.

    ``turns`` feed complete_with_tools in order; the last turn repeats once the
    script runs out. ``fragments`` feed stream_with_tools. ``stream_finished``
    turns true once every fragment has been yielded. Passing an exception
    instance as ``complete_error`` / ``stream_error`` makes that call raise.
    """

    def __init__(
        self,
        turns: Optional[List[ModelTurn]] = None,
        fragments: Optional[List[str]] = None,
        complete_error: Optional[Exception] = None,
        stream_error: Optional[Exception] = None,
        fail_after_fragments: int = 0,
    ):
        super().__init__(api_key='test-key', model='scripted')
        self.turns = list(turns or [ModelTurn(text='', stop_reason='end_turn')])
        self.fragments = list(fragments or [])
        self.complete_error = complete_error
        self.stream_error = stream_error
        self.fail_after_fragments = fail_after_fragments
        self.complete_calls = []
        self.stream_calls = []
        self.stream_finished = False

    async def generate(self, messages, system_prompt=None, max_tokens=4096, temperature=0.7, **kwargs):
        raise NotImplementedError

    async def complete_with_tools(self, system_prompt, tools, messages, max_tokens=2048, **kwargs):
        self.complete_calls.append({
            'system_prompt': system_prompt,
            'tools': tools,
            'messages': list(messages),
        })
        if self.complete_error is not None:
            raise self.complete_error
        index = min(len(self.complete_calls) - 1, len(self.turns) - 1)
        return self.turns[index]

    async def stream_with_tools(self, system_prompt, tools, messages, max_tokens=2048, **kwargs):
        self.stream_calls.append({
            'system_prompt': system_prompt,
            'tools': tools,
            'messages': list(messages),
        })
        limit = self.fail_after_fragments if self.stream_error is not None else len(self.fragments)
        for fragment in self.fragments[:limit]:
            await asyncio.sleep(0)
            yield fragment
        if self.stream_error is not None:
            raise self.stream_error
        self.stream_finished = True


def tool_turn(*calls: ToolCall, text: str = '') -> ModelTurn:
    """A gathering-phase turn requesting ``calls``."""
    return ModelTurn(text=text, tool_calls=list(calls), stop_reason='tool_use')


def final_turn(text: str = '') -> ModelTurn:
    return ModelTurn(text=text, stop_reason='end_turn')


async def collect(async_iterable) -> list:
    return [item async for item in async_iterable]


def event_dicts(events) -> List[dict]:
    return [event.to_dict() for event in events]


def parse_sse(body: str) -> List[dict]:
    """Split an SSE body into the JSON payloads of its ``data:`` lines."""
    payloads = []
    for block in body.split('\n\n'):
        block = block.strip()
        if block.startswith('data: '):
            payloads.append(json.loads(block[6:]))
    return payloads
