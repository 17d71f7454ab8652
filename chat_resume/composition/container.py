"""Composition root wiring adapters to the core services."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.outbound.cache.memory_cache import InMemoryTTLCache
from ..adapters.outbound.embedding.gemini_embedding import GeminiEmbeddingAdapter
from ..adapters.outbound.llm.gemini_adapter import GeminiLLMAdapter
from ..adapters.outbound.sqlite_adapter import SQLiteAdapter
from ..adapters.outbound.vector_store.qdrant_adapter import QdrantAdapter
from ..common.rate_limiter import RateLimiter
from ..config import settings
from ..core.services.chunker import Chunker
from ..core.services.conversation_service import ConversationService
from ..core.services.ingestion_service import IngestionService
from ..core.services.intent_service import IntentRouter
from ..core.services.retrieval_service import RetrievalService
from ..core.services.suggestion_service import SuggestionService
from ..core.services.tools import ToolRegistry, build_resume_tools

logger = logging.getLogger(__name__)


@lru_cache
def get_repository() -> SQLiteAdapter:
    logger.info("Initializing SQLiteAdapter at %s", settings.database_path)
    return SQLiteAdapter(settings.database_path)


@lru_cache
def get_embedder() -> GeminiEmbeddingAdapter:
    logger.info("Initializing GeminiEmbeddingAdapter...")
    return GeminiEmbeddingAdapter(
        api_key=settings.google_api_key,
        model_name=settings.embedding_model,
        dimension=settings.embedding_dimension,
        rate_limiter=RateLimiter(settings.embedding_requests_per_minute),
        max_retries=settings.embedding_max_retries,
    )


@lru_cache
def get_vector_store() -> QdrantAdapter:
    logger.info("Initializing QdrantAdapter (composition root)...")
    return QdrantAdapter(
        collection_name=settings.qdrant_collection,
        dimension=settings.embedding_dimension,
        url=settings.qdrant_url,
        api_key=settings.qdrant_api_key,
        path=settings.qdrant_path,
    )


@lru_cache
def get_llm() -> GeminiLLMAdapter:
    logger.info("Initializing GeminiLLMAdapter...")
    return GeminiLLMAdapter(
        api_key=settings.google_api_key,
        model=settings.llm_model,
        structured_model=settings.structured_model,
        rate_limiter=RateLimiter(settings.llm_requests_per_minute),
    )


@lru_cache
def get_ingestion_service() -> IngestionService:
    logger.info("Initializing IngestionService...")
    return IngestionService(
        chunker=Chunker(settings.chunk_size, settings.chunk_overlap),
        embedder=get_embedder(),
        vector_store=get_vector_store(),
        documents=get_repository(),
    )


@lru_cache
def get_retrieval_service() -> RetrievalService:
    logger.info("Initializing RetrievalService...")
    return RetrievalService(get_embedder(), get_vector_store(), get_repository())


@lru_cache
def get_intent_router() -> IntentRouter:
    logger.info("Initializing IntentRouter...")
    return IntentRouter(
        get_llm(),
        get_repository(),
        persona=settings.persona_name,
        timeout=settings.intent_timeout_seconds,
    )


@lru_cache
def get_tool_registry() -> ToolRegistry:
    return build_resume_tools(
        get_ingestion_service(),
        persona=settings.persona_name,
        raw_text_min_length=settings.raw_text_min_length,
    )


@lru_cache
def get_conversation_service() -> ConversationService:
    logger.info("Initializing ConversationService...")
    return ConversationService(
        llm=get_llm(),
        retriever=get_retrieval_service(),
        intent_router=get_intent_router(),
        tools=get_tool_registry(),
        persona=settings.persona_name,
        top_k=settings.top_k_results,
        raw_text_min_length=settings.raw_text_min_length,
        max_tool_rounds=settings.max_tool_rounds,
    )


@lru_cache
def get_suggestion_service() -> SuggestionService:
    logger.info("Initializing SuggestionService...")
    return SuggestionService(
        get_llm(),
        InMemoryTTLCache(),
        persona=settings.persona_name,
        timeout=settings.suggestion_timeout_seconds,
        cache_ttl_seconds=settings.suggestion_cache_ttl_seconds,
    )
