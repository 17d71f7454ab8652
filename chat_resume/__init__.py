"""Chat resume: a conversational resume backed by a RAG knowledge base."""

__version__ = "1.0.0"
