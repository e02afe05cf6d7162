"""
Assistant chat stream

POST /api/chat/ runs one AssistantSession and streams its events to the
planner's browser as Server-Sent Events.
"""
import asyncio
import json
import logging
from typing import List, Optional, Set

from django.http import JsonResponse, StreamingHttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.common.auth import authenticate_planner
from apps.common.correlation import set_correlation_id
from apps.common.llm_providers import ChatMessage

from .events import SafeEventChannel
from .prompts import build_system_prompt
from .serializers import ChatRequestSerializer
from .session import AssistantSession

logger = logging.getLogger(__name__)

# Sessions outlive a disconnected client; hold a reference until they finish
_running_sessions: Set[asyncio.Task] = set()


def _error_response(message: str, status: int) -> JsonResponse:
    return JsonResponse({'success': False, 'error': message}, status=status)


async def _run_session(
    session: AssistantSession,
    messages: List[ChatMessage],
    system_prompt: str,
    channel: SafeEventChannel,
    correlation_id: Optional[str],
) -> None:
    """Producer: push every session event into the channel, then mark it finished."""
    set_correlation_id(correlation_id)
    try:
        async for event in session.run(messages, system_prompt):
            channel.send(event)
    finally:
        channel.finish()
        if channel.closed:
            logger.info(
                "assistant_session_finished_after_disconnect",
                extra={'dropped_events': channel.dropped},
            )


@csrf_exempt
@require_POST
async def assistant_chat_stream(request):
    """
    Streaming planner assistant.

    POST /api/chat/
    Authorization: Bearer <planner password>
    {
        "messages": [{"role": "user", "content": "How are Sarah & Mike doing?"}],
        "context": {"view": "couples"}  // optional
    }

    Streams ``data: {...}`` events:
    - {"type": "delta", "text": "..."}
    - {"type": "action", "action": {"type": "navigate", "payload": {...}}}
    - {"type": "done"}
    - {"type": "error", "message": "..."}
    """
    if authenticate_planner(request) is None:
        return _error_response('Unauthorized', 401)

    try:
        body = json.loads(request.body)
    except (json.JSONDecodeError, ValueError):
        return _error_response('Invalid JSON body', 400)

    if not isinstance(body, dict) or not isinstance(body.get('messages'), list) or not body['messages']:
        return _error_response('Messages are required', 400)

    serializer = ChatRequestSerializer(data=body)
    if not serializer.is_valid():
        logger.info("assistant_request_invalid", extra={'errors': serializer.errors})
        return _error_response('Invalid message format', 400)

    messages = serializer.to_chat_messages()
    system_prompt = build_system_prompt(serializer.current_view)

    try:
        session = AssistantSession()
    except Exception:
        logger.exception("assistant_session_init_failed")
        return _error_response('Failed to process chat message', 500)

    correlation_id = getattr(request, 'correlation_id', None)
    channel = SafeEventChannel()
    task = asyncio.create_task(
        _run_session(session, messages, system_prompt, channel, correlation_id)
    )
    _running_sessions.add(task)
    task.add_done_callback(_running_sessions.discard)

    logger.info(
        "assistant_stream_started",
        extra={'message_count': len(messages), 'view': serializer.current_view},
    )

    async def event_stream():
        try:
            async for event in channel:
                yield event.encode()
        finally:
            # Client disconnected or stream complete; later sends become no-ops
            channel.close()

    response = StreamingHttpResponse(event_stream(), content_type="text/event-stream")
    response["Cache-Control"] = "no-cache, no-transform"
    response["X-Accel-Buffering"] = "no"
    return response
