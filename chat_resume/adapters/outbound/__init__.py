"""Outbound adapters: Gemini, Qdrant, SQLite, caching and file extraction."""
