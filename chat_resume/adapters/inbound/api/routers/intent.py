"""Diagnostic intent detection endpoint."""

from fastapi import APIRouter, Depends

from .....core.domain.exceptions import EmptyQueryError
from .....core.services.intent_service import IntentRouter
from ..deps import get_intent_router
from ..models import ErrorResponse, IntentInfo, IntentRequest, IntentResponse

router = APIRouter(prefix="/api/v1/intent", tags=["intent"])


@router.post(
    "/detect",
    response_model=IntentResponse,
    responses={400: {"model": ErrorResponse, "description": "Empty message"}},
)
def detect_intent(
    body: IntentRequest,
    intent_router: IntentRouter = Depends(get_intent_router),
) -> IntentResponse:
    if not body.message.strip():
        raise EmptyQueryError("Message is required")
    return IntentResponse(intent=IntentInfo.from_domain(intent_router.detect_intent(body.message)))
