"""Context retriever: similarity search joined back to source documents."""

import logging
import re

from ..domain import ChunkMatch, Document, DocumentStatus, RetrievedContext
from ..domain.exceptions import ChatResumeError
from ..domain.utils import normalize_text, single_line
from ..ports.embedding_port import EmbeddingPort
from ..ports.repository_port import DocumentRepositoryPort
from ..ports.vector_store_port import VectorStorePort
from .prompts import CONTEXT_SEPARATOR, NO_CONTEXT_AVAILABLE

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "Unknown"

# Lines that look like prompt section headers, separators or source headers
_STRUCTURAL_LINE = re.compile(r"^\s*(#{2,}|-{3,}|={3,}|\[Source\s+\d+:)", re.IGNORECASE)


def escape_prompt_text(text: str) -> str:
    """Neutralize lines that could pass for prompt section delimiters."""
    lines = normalize_text(text).splitlines()
    return "\n".join("\\" + line if _STRUCTURAL_LINE.match(line) else line for line in lines)


def _escape_title(title: str) -> str:
    return single_line(normalize_text(title)).replace("[", "(").replace("]", ")")


def format_context_for_prompt(contexts: list[RetrievedContext]) -> str:
    """Render retrieved contexts as numbered source blocks.

    Args:
        contexts: Contexts in ranking order.

    Returns:
        Blocks of the form ``[Source i: title (Relevance: 87.5%)]`` followed by
        the chunk text, joined by separator lines, or a fixed sentinel when
        there is nothing to show.
    """
    if not contexts:
        return NO_CONTEXT_AVAILABLE

    blocks = []
    for idx, ctx in enumerate(contexts, start=1):
        header = f"[Source {idx}: {_escape_title(ctx.source)} (Relevance: {ctx.similarity * 100:.1f}%)]"
        blocks.append(f"{header}\n{escape_prompt_text(ctx.content)}")

    return f"\n{CONTEXT_SEPARATOR}\n".join(blocks)


class RetrievalService:
    """Retrieves knowledge-base passages relevant to a visitor's question.

    Retrieval is fail-soft end to end: embedding, search or lookup trouble
    degrades to fewer (or no) contexts instead of breaking the conversation.
    """

    def __init__(
        self,
        embedder: EmbeddingPort,
        vector_store: VectorStorePort,
        documents: DocumentRepositoryPort,
    ) -> None:
        """Initialize the retriever.

        Args:
            embedder: Embedding capability used for the query.
            vector_store: Chunk store to search.
            documents: Repository used to resolve source titles.
        """
        self.embedder = embedder
        self.vector_store = vector_store
        self.documents = documents

    def retrieve(self, query: str, limit: int = 5) -> list[RetrievedContext]:
        """Find the passages closest to a query.

        Args:
            query: Visitor question.
            limit: Maximum number of contexts.

        Returns:
            Contexts ordered by descending similarity; [] on blank input or failure.
        """
        clean_query = normalize_text(query).strip()
        if not clean_query or limit <= 0:
            return []

        try:
            query_embedding = self.embedder.embed_query(clean_query)
        except ChatResumeError as e:
            logger.warning("Query embedding failed, answering without context: %s", e)
            return []

        matches = self.vector_store.search(query_embedding, limit)
        if not matches:
            logger.debug("No stored chunks matched the query")
            return []

        documents = self._lookup_documents(matches)
        contexts = []
        for match in matches:
            document = documents.get(match.document_id)
            if document and document.status == DocumentStatus.FAILED:
                continue
            contexts.append(
                RetrievedContext(
                    content=match.content,
                    source=document.title if document else UNKNOWN_SOURCE,
                    similarity=match.similarity,
                    metadata={
                        **match.metadata,
                        "fileType": document.file_type if document else None,
                    },
                )
            )

        logger.debug("Retrieved %d contexts for query", len(contexts))
        return contexts

    def _lookup_documents(self, matches: list[ChunkMatch]) -> dict[str, Document]:
        document_ids = list(dict.fromkeys(match.document_id for match in matches))
        try:
            return self.documents.get_documents_by_ids(document_ids)
        except ChatResumeError as e:
            logger.warning("Source lookup failed, titles fall back to %s: %s", UNKNOWN_SOURCE, e)
            return {}
