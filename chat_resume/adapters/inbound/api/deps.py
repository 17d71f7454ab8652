"""FastAPI dependencies for the chat resume API."""

import hmac
import logging

from fastapi import Header

from ....composition.container import (
    get_conversation_service,
    get_ingestion_service,
    get_intent_router,
    get_repository,
    get_retrieval_service,
    get_suggestion_service,
    get_vector_store,
)
from ....config import settings
from ....core.domain.exceptions import AdminDisabledError, UnauthorizedError

logger = logging.getLogger(__name__)

__all__ = [
    "get_conversation_service",
    "get_ingestion_service",
    "get_intent_router",
    "get_repository",
    "get_retrieval_service",
    "get_suggestion_service",
    "get_vector_store",
    "require_admin",
]


def require_admin(x_admin_key: str | None = Header(default=None)) -> None:
    """Allow the request only when ``X-Admin-Key`` matches the configured key.

    Raises:
        AdminDisabledError: If no admin key is configured.
        UnauthorizedError: If the header is missing or wrong.
    """
    if not settings.admin_api_key:
        raise AdminDisabledError("Admin operations are disabled")
    if not x_admin_key or not hmac.compare_digest(x_admin_key.encode(), settings.admin_api_key.encode()):
        logger.warning("Rejected admin request with invalid key")
        raise UnauthorizedError("Invalid admin key")
