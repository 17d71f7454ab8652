"""Prompt suggestion endpoint."""

import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from .....core.services.suggestion_service import DEFAULT_SUGGESTIONS, SuggestionService
from ..deps import get_suggestion_service
from ..models import SuggestionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["suggestions"])


@router.post("/suggestions", response_model=SuggestionResponse)
async def suggest_prompts(
    request: Request,
    service: SuggestionService = Depends(get_suggestion_service),
) -> SuggestionResponse:
    """Suggest four follow-up prompts from the visitor's recent prompts.

    A malformed body yields the default suggestions instead of an error.
    """
    try:
        body = await request.json()
        history = body.get("history") or []
        if not isinstance(history, list):
            raise TypeError("history must be a list")
    except Exception as e:
        logger.warning("Malformed suggestions request: %s", e)
        return SuggestionResponse(suggestions=list(DEFAULT_SUGGESTIONS))

    prompts = [item for item in history if isinstance(item, str) and item.strip()]
    suggestions = await run_in_threadpool(service.suggest, prompts)
    return SuggestionResponse(suggestions=suggestions)
