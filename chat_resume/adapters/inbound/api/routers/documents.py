"""Knowledge-base document endpoints (admin only)."""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from .....adapters.outbound.file_processor import extract_text, get_file_type
from .....core.ports import DocumentRepositoryPort
from .....core.services.ingestion_service import IngestionService
from ..deps import get_ingestion_service, get_repository, require_admin
from ..models import DocumentInfo, DocumentListResponse, ErrorResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/documents",
    tags=["documents"],
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse, "description": "Invalid admin key"}},
)


@router.get("", response_model=DocumentListResponse)
def list_documents(repository: DocumentRepositoryPort = Depends(get_repository)) -> DocumentListResponse:
    """List stored documents, newest first."""
    return DocumentListResponse(documents=[DocumentInfo.from_domain(d) for d in repository.list_documents()])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse, "description": "Unsupported or unreadable file"}},
)
def upload_document(
    file: UploadFile = File(...),
    title: str | None = Form(default=None),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> UploadResponse:
    """Extract, chunk, embed and store an uploaded file.

    Raises:
        UnsupportedInputError: If the file type is not md, txt, pdf, docx or doc.
        TextExtractionError: If the file cannot be read.
    """
    file_name = file.filename or "upload"
    data = file.file.read()
    text = extract_text(file_name, data)

    document = ingestion.register_document(
        title=(title or "").strip() or file_name.rsplit(".", 1)[0],
        content=text,
        file_type=get_file_type(file_name),
        file_name=file_name,
        file_size=len(data),
        uploaded_by="admin",
        metadata={"source": "upload"},
    )
    logger.info("Uploaded %s as document %s", file_name, document.id)
    return UploadResponse(document=DocumentInfo.from_domain(document))
