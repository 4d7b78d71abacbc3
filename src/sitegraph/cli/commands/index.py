"""
Index Command - Build the graph document from a documentation tree.
"""

import json
import logging
from pathlib import Path

import click
from pydantic import BaseModel

from ...config import DEFAULT_GRAPH_PATH
from ...indexing import IndexConfig, index_to_file
from ..utils import echo_error, echo_info, echo_success, echo_warning

logger = logging.getLogger(__name__)


class IndexSummary(BaseModel):
    """
    Structured response for the index command.
    """
    files_indexed: int
    files_failed: int
    entries: int
    links: int
    tags: int
    output_path: str
    duration_sec: float


@click.command()
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("-o", "--output", default=str(DEFAULT_GRAPH_PATH), help="Output graph document")
@click.option("--no-content", is_flag=True, help="Omit document bodies from the output")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
@click.option("--json", "as_json", is_flag=True, help="Output summary as JSON")
def index(directory: str, output: str, no_content: bool, verbose: bool, as_json: bool):
    """
    Index Markdown documents and write the graph document.

    Every document becomes an entry keyed by its slug, with outgoing links,
    derived backlinks and tags. Referenced slugs without a document get
    a stub entry.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )

    root_dir = Path(directory).resolve()
    output_path = Path(output)
    config = IndexConfig(root_dir=root_dir, include_content=not no_content)

    result = index_to_file(config, output_path)
    if result.is_err():
        error = result.unwrap_err()
        if as_json:
            click.echo(json.dumps({
                "meta": {"status": "error"},
                "error": {"message": error.message, "file": error.file_path},
            }))
        else:
            echo_error(f"Indexing failed: {error.message}")
        raise SystemExit(1)

    stats = result.unwrap()
    if as_json:
        summary = IndexSummary(
            files_indexed=stats.files_indexed,
            files_failed=stats.files_failed,
            entries=stats.entries,
            links=stats.links,
            tags=stats.tags,
            output_path=str(output_path),
            duration_sec=round(stats.index_time_ms / 1000, 3),
        )
        click.echo(json.dumps({"meta": {"status": "success"}, "data": summary.model_dump()}))
        return

    echo_success(f"Indexed {stats.files_indexed} documents into {output_path}")
    echo_info(f"Entries: {stats.entries}  Links: {stats.links}  Tags: {stats.tags}")
    if stats.files_failed:
        echo_warning(f"{stats.files_failed} documents could not be read (run with -v for details)")
