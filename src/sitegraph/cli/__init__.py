"""Command line interface for sitegraph."""

from .main import main

__all__ = ["main"]
