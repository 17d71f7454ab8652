"""Adapters connecting the core to frameworks and external services."""
