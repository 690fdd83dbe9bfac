"""Command line interface."""

from .main import ContentForgeCommands, main

__all__ = ["ContentForgeCommands", "main"]
