"""
Watch Command.

Rebuilds the graph document whenever a Markdown file changes.
"""

import logging
from pathlib import Path

import click
from rich.console import Console

from ...config import DEFAULT_GRAPH_PATH

console = Console()


@click.command()
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("-o", "--output", default=str(DEFAULT_GRAPH_PATH), help="Output graph document")
@click.option("--no-content", is_flag=True, help="Omit document bodies from the output")
def watch(directory: str, output: str, no_content: bool):
    """
    Watch a documentation tree and re-index on change.

    Creating, modifying, moving or deleting a Markdown document triggers
    a full rebuild of the graph document.
    """
    # Configure logging to ensure we see the watcher events
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="[%X]"
    )

    # Lazy import: Only import the watcher (and watchdog) when this command actually RUNS.
    from ..watcher import FileSystemWatcher

    root_dir = Path(directory).resolve()
    output_path = Path(output).resolve()

    console.print("[bold green]sitegraph watch[/bold green]")
    console.print(f"Watching: [cyan]{root_dir}[/cyan]")
    console.print(f"Output:   [cyan]{output_path}[/cyan]")

    watcher = FileSystemWatcher(root_dir, output_path, include_content=not no_content)
    watcher.start()
