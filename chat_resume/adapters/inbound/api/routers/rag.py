"""Diagnostic knowledge-base query endpoint."""

import logging

from fastapi import APIRouter, Depends

from .....core.domain.exceptions import EmptyQueryError
from .....core.services.retrieval_service import RetrievalService
from ..deps import get_retrieval_service
from ..models import ContextInfo, ErrorResponse, RagQueryRequest, RagQueryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/rag", tags=["knowledge-base"])


@router.post(
    "/query",
    response_model=RagQueryResponse,
    responses={400: {"model": ErrorResponse, "description": "Empty query"}},
)
def query_knowledge_base(
    body: RagQueryRequest,
    retriever: RetrievalService = Depends(get_retrieval_service),
) -> RagQueryResponse:
    """Return the contexts the chat would use for a query."""
    if not body.query.strip():
        raise EmptyQueryError("Query is required")

    contexts = retriever.retrieve(body.query, limit=body.limit)
    logger.info("RAG query returned %d contexts", len(contexts))
    return RagQueryResponse(contexts=[ContextInfo.from_domain(c) for c in contexts])
