"""Ports: the capability interfaces the core services depend on."""

from .cache_port import CachePort
from .embedding_port import EmbeddingPort
from .llm_port import LLMPort
from .repository_port import ComponentRegistryPort, DocumentRepositoryPort
from .vector_store_port import VectorStorePort

__all__ = [
    "CachePort",
    "EmbeddingPort",
    "LLMPort",
    "ComponentRegistryPort",
    "DocumentRepositoryPort",
    "VectorStorePort",
]
