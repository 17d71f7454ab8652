"""Typer command-line interface.

Installed as the ``chat-resume`` console script.
"""
