"""UI component registry endpoints."""

import logging

from fastapi import APIRouter, Depends

from .....core.ports import ComponentRegistryPort
from .....core.services.component_catalog import validate_component
from ..deps import get_repository, require_admin
from ..models import ComponentCreateRequest, ComponentInfo, ComponentListResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/components", tags=["components"])


@router.get("", response_model=ComponentListResponse)
def list_components(registry: ComponentRegistryPort = Depends(get_repository)) -> ComponentListResponse:
    """List active components, highest priority first."""
    return ComponentListResponse(
        components=[ComponentInfo.from_domain(c) for c in registry.list_active_components()]
    )


@router.post(
    "",
    response_model=ComponentInfo,
    status_code=201,
    dependencies=[Depends(require_admin)],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or duplicate component"},
        401: {"model": ErrorResponse, "description": "Invalid admin key"},
    },
)
def create_component(
    body: ComponentCreateRequest,
    registry: ComponentRegistryPort = Depends(get_repository),
) -> ComponentInfo:
    """Register a new UI component."""
    component = body.to_domain()
    validate_component(component)
    created = registry.create_component(component)
    logger.info("Registered component %s", created.name)
    return ComponentInfo.from_domain(created)
