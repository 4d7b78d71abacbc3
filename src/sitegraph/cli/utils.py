"""
CLI Utilities - Shared helper functions for command line operations.

This module provides formatted printing and graph document loading used
across the sitegraph commands.
"""

from pathlib import Path
from typing import Optional

import click

from ..config import DEFAULT_GRAPH_PATH
from ..core.document import load_graph_document
from ..core.errors import GraphDocumentError
from ..core.types import GraphDocument


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """
    Print an informational message, dimmed.

    Args:
        message (str): The info message to display.
    """
    click.echo(click.style(f"   {message}", dim=True))


def resolve_graph_path(graph_file: str) -> Path:
    """
    Resolve a graph document path.

    A directory resolves to the default ``public/sitemap.json`` inside it.
    """
    graph_path = Path(graph_file)
    if graph_path.is_dir():
        graph_path = graph_path / DEFAULT_GRAPH_PATH
    return graph_path


def load_document(graph_file: str) -> Optional[GraphDocument]:
    """
    Load a graph document, reporting failures to the user.

    Args:
        graph_file (str): Path to a graph JSON file or a site directory.

    Returns:
        Optional[GraphDocument]: The loaded document, or None if loading failed.
    """
    graph_path = resolve_graph_path(graph_file)

    if not graph_path.exists():
        echo_error(f"Graph file not found: {graph_path}")
        click.echo("Run 'sitegraph index <docs-root>' first to create it.")
        return None

    try:
        return load_graph_document(graph_path)
    except GraphDocumentError as e:
        echo_error(f"Failed to load graph: {e}")
        return None
