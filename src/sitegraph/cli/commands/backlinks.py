"""
Backlinks Command - List the documents referring to a document.
"""

import click
from rich.console import Console
from rich.table import Table

from ...config import DEFAULT_GRAPH_PATH
from ...core.slugs import normalize_slug
from ..utils import echo_error, echo_info, load_document

console = Console()


@click.command()
@click.argument("slug")
@click.option("-i", "--input", "graph_file", default=str(DEFAULT_GRAPH_PATH),
              help="Input graph document or site directory")
def backlinks(graph_file: str, slug: str):
    """
    List the documents linking to SLUG.
    """
    document = load_document(graph_file)
    if document is None:
        raise SystemExit(1)

    slug = normalize_slug(slug)
    entry = document.get(slug)
    if entry is None:
        echo_error(f"'{slug}' is not in the graph")
        raise SystemExit(1)

    if not entry.backlinks:
        echo_info(f"No documents link to '{slug}'")
        return

    table = Table(title=f"Backlinks to {slug}")
    table.add_column("Slug", style="cyan")
    table.add_column("Title")

    for source in entry.backlinks:
        source_entry = document.get(source)
        table.add_row(source, source_entry.title if source_entry else source)

    console.print(table)
