"""Core of the chat resume service: domain models, ports and services."""
