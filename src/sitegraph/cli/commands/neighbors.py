"""
Neighbors Command - Show the neighborhood of a document.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from ...config import DEFAULT_GRAPH_PATH
from ...core.slugs import normalize_slug
from ...graph import RuntimeGraphView, select
from ..utils import echo_info, load_document

console = Console()


@click.command()
@click.argument("slug")
@click.option("-i", "--input", "graph_file", default=str(DEFAULT_GRAPH_PATH),
              help="Input graph document or site directory")
@click.option("-d", "--depth", default=1, show_default=True, help="Hop bound (negative = whole graph)")
@click.option("--no-tags", is_flag=True, help="Exclude tag nodes")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def neighbors(graph_file: str, slug: str, depth: int, no_tags: bool, as_json: bool):
    """
    Show every document within DEPTH links of SLUG.

    Links are followed in both directions.
    """
    document = load_document(graph_file)
    if document is None:
        raise SystemExit(1)

    view = RuntimeGraphView.from_document(document)
    hood = select(view, normalize_slug(slug), depth, show_tags=not no_tags)

    if as_json:
        click.echo(json.dumps({
            "focal": hood.focal,
            "nodes": hood.nodes,
            "edges": [edge.model_dump() for edge in hood.edges],
        }, indent=2))
        return

    if not view.has_node(hood.focal):
        echo_info(f"'{hood.focal}' is not in the graph")
        return

    table = Table(title=f"Neighborhood of {hood.focal} (depth {depth})")
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Kind", style="dim")
    table.add_column("Edges", justify="right")

    for node in hood.nodes:
        table.add_row(node, view.title(node), str(view.kind(node)), str(hood.degree(node)))

    console.print(table)
    echo_info(f"{len(hood.nodes)} nodes, {len(hood.edges)} edges")
