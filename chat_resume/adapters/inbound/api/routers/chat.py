"""Chat endpoint streaming the assistant's reply as newline-delimited JSON."""

import json
import logging
import threading
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from .....core.domain import Message, Role, TextMessage
from .....core.domain.exceptions import EmptyQueryError
from .....core.services.conversation_service import ConversationService
from ..deps import get_conversation_service
from ..models import ChatRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["chat"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


async def stream_events(
    request: Request,
    service: ConversationService,
    messages: list[Message],
) -> AsyncIterator[str]:
    """Relay conversation events to the client, one JSON object per line.

    A client disconnect sets the cancel event, which ends generation and
    any in-flight tool round.
    """
    cancel = threading.Event()
    events = service.stream_reply(messages, cancel_event=cancel)
    try:
        while True:
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling chat stream")
                cancel.set()
            event = await run_in_threadpool(next, events, None)
            if event is None:
                break
            yield json.dumps(event.to_dict()) + "\n"
    finally:
        cancel.set()
        try:
            events.close()
        except ValueError:
            # Still running in a worker thread; it stops at its next chunk
            logger.debug("Chat stream generator busy, left to finish on cancel")


@router.post(
    "/chat",
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}, "description": "Stream of chat events"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
    },
)
async def chat(
    body: ChatRequest,
    request: Request,
    service: ConversationService = Depends(get_conversation_service),
) -> StreamingResponse:
    """Answer the latest visitor message.

    Events are ``text-delta``, ``tool-call``, ``tool-result`` and a final
    ``finish`` carrying the terminal state.

    Raises:
        EmptyQueryError: If the last message is not a non-empty user text message.
    """
    messages = [message.to_domain() for message in body.messages]
    last = messages[-1] if messages else None
    if not isinstance(last, TextMessage) or last.role != Role.USER or not last.content.strip():
        raise EmptyQueryError("The last message must be a non-empty user message")

    logger.info("Chat request with %d messages", len(messages))
    return StreamingResponse(stream_events(request, service, messages), media_type=NDJSON_MEDIA_TYPE)
