"""Application services: chunking, ingestion, retrieval, intent routing and conversation."""
