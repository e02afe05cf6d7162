"""
Assistant session: the two-phase tool-use loop behind one chat request.

GATHERING   blocking model calls; every requested tool runs concurrently and
            its result is fed back, until the model stops asking for tools
            or the round cap is hit. Text written between tool rounds is
            never shown to the user.
STREAMING   one streamed model call over the full exchange; every fragment
            goes to the client as it arrives.
DONE        the captured client action (if any), then ``done``.
ERROR       a model call failed; one ``error`` event and nothing after it.

A request that never uses a tool skips STREAMING: the first answer is sent
as a single delta.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional

from django.conf import settings

from apps.common.llm_providers import ChatMessage, LLMProvider, get_llm_provider

from .events import StreamEvent
from .tools import ActionTracker, ToolRegistry
from .tools.executor import ToolExecutor

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong"


def _tool_label(name: str) -> str:
    tool = ToolRegistry.get(name)
    return tool.display_name if tool else name


class SessionPhase(Enum):
    GATHERING = "gathering"
    STREAMING = "streaming"
    DONE = "done"
    ERROR = "error"


@dataclass
class SessionState:
    """Per-request loop state. Never shared between requests."""
    iteration_count: int = 0
    phase: SessionPhase = SessionPhase.GATHERING
    tools_used: bool = False
    actions: ActionTracker = field(default_factory=ActionTracker)


class AssistantSession:
    """
    Runs one assistant request from the incoming messages to the last event.

    Usage:
        session = AssistantSession()
        async for event in session.run(messages, system_prompt):
            ...
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        executor=ToolExecutor,
        tools: Optional[List[Dict[str, Any]]] = None,
        max_iterations: Optional[int] = None,
        max_tokens: Optional[int] = None,
    ):
        self.provider = provider or get_llm_provider('assistant')
        self.executor = executor
        self.tools = tools if tools is not None else ToolRegistry.as_llm_tools()
        self.max_iterations = max_iterations or settings.ASSISTANT_MAX_ITERATIONS
        self.max_tokens = max_tokens or settings.ASSISTANT_MAX_TOKENS
        self.state = SessionState()
        self.history: List[ChatMessage] = []

    def _enter(self, phase: SessionPhase) -> None:
        logger.info(
            "assistant_phase_changed",
            extra={
                'from_phase': self.state.phase.value,
                'to_phase': phase.value,
                'iteration_count': self.state.iteration_count,
            },
        )
        self.state.phase = phase

    async def run(
        self,
        messages: List[ChatMessage],
        system_prompt: str,
    ) -> AsyncIterator[StreamEvent]:
        """Yield the request's events in order: deltas, optional action, done (or one error)."""
        self.history = list(messages)
        state = self.state
        started = time.monotonic()

        try:
            async for event in self._gather(system_prompt):
                yield event

            if state.phase == SessionPhase.STREAMING and state.actions.skips_streaming:
                # Booking confirmations navigate straight away
                self._enter(SessionPhase.DONE)

            if state.phase == SessionPhase.STREAMING:
                async for event in self._stream(system_prompt):
                    yield event
                self._enter(SessionPhase.DONE)

        except Exception as e:
            logger.exception(
                "assistant_session_failed",
                extra={
                    'phase': state.phase.value,
                    'iteration_count': state.iteration_count,
                    'error_type': type(e).__name__,
                },
            )
            self._enter(SessionPhase.ERROR)
            yield StreamEvent.error(str(e) or DEFAULT_ERROR_MESSAGE)
            return

        if state.actions.current is not None:
            yield StreamEvent.action(state.actions.current)
        yield StreamEvent.done()

        logger.info(
            "assistant_session_completed",
            extra={
                'iteration_count': state.iteration_count,
                'tools_used': state.tools_used,
                'action_type': state.actions.current.type if state.actions.current else None,
                'duration_ms': int((time.monotonic() - started) * 1000),
            },
        )

    async def _gather(self, system_prompt: str) -> AsyncIterator[StreamEvent]:
        state = self.state

        while state.phase == SessionPhase.GATHERING:
            if state.iteration_count >= self.max_iterations:
                logger.warning(
                    "assistant_iteration_cap_reached",
                    extra={'iteration_count': state.iteration_count},
                )
                self._enter(SessionPhase.STREAMING if state.tools_used else SessionPhase.DONE)
                return

            turn = await self.provider.complete_with_tools(
                system_prompt=system_prompt,
                tools=self.tools,
                messages=self.history,
                max_tokens=self.max_tokens,
            )

            if not turn.tool_calls or turn.is_natural_stop:
                if state.tools_used:
                    # The streamed answer replaces this one
                    self._enter(SessionPhase.STREAMING)
                else:
                    if turn.text:
                        yield StreamEvent.delta(turn.text)
                    self._enter(SessionPhase.DONE)
                return

            self.history.append(
                ChatMessage(role='assistant', content=list(turn.tool_calls), text=turn.text)
            )
            results = await self.executor.execute_batch(turn.tool_calls)
            self.history.append(
                ChatMessage(role='user', content=[result.to_block() for result in results])
            )
            state.actions.record(results)
            state.tools_used = True
            state.iteration_count += 1

            logger.info(
                "assistant_tool_round",
                extra={
                    'iteration_count': state.iteration_count,
                    'tools': [_tool_label(call.name) for call in turn.tool_calls],
                    'failed': sum(1 for result in results if not result.success),
                },
            )

    async def _stream(self, system_prompt: str) -> AsyncIterator[StreamEvent]:
        async for fragment in self.provider.stream_with_tools(
            system_prompt=system_prompt,
            tools=self.tools,
            messages=self.history,
            max_tokens=self.max_tokens,
        ):
            if fragment:
                yield StreamEvent.delta(fragment)
