"""Common utilities and shared functionality.

This package contains helpers used across multiple layers: exception
formatting for the API and CLI, and the rate limiter for the model APIs.
"""
