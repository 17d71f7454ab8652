"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends

from ..... import __version__
from .....core.ports import DocumentRepositoryPort, VectorStorePort
from ..deps import get_repository, get_vector_store
from ..models import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        HealthResponse with current status and version.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        vector_store="not_checked",
    )


@router.get("/ready", response_model=HealthResponse)
def readiness_check(
    vector_store: VectorStorePort = Depends(get_vector_store),
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> HealthResponse:
    """Readiness probe.

    Checks that the vector store and the document database are accessible.

    Returns:
        HealthResponse with chunk and document counts.
    """
    try:
        chunks = vector_store.count()
        documents = repository.count_documents()
        vs_status = f"connected ({chunks} chunks from {documents} documents)"
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return HealthResponse(status="degraded", version=__version__, vector_store=f"error: {e}")

    return HealthResponse(
        status="ready",
        version=__version__,
        vector_store=vs_status,
        chunks=chunks,
        documents=documents,
    )
