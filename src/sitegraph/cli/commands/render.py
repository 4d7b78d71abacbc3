"""
Render Command - Export an interactive graph page.
"""

from pathlib import Path

import click

from ...config import DEFAULT_CONFIG_PATH, DEFAULT_GRAPH_PATH
from ...core.errors import ConfigError
from ...render import RenderConfig, write_html
from ..utils import echo_error, echo_info, echo_success, load_document


@click.command()
@click.argument("slug")
@click.option("-i", "--input", "graph_file", default=str(DEFAULT_GRAPH_PATH),
              help="Input graph document or site directory")
@click.option("-o", "--output", default="graph.html", help="Output HTML file")
@click.option("-c", "--config", "config_file", default=None,
              help=f"Graph configuration YAML (default: {DEFAULT_CONFIG_PATH} if present)")
@click.option("-d", "--depth", type=int, default=None, help="Override the configured depth")
@click.option("--open", "open_browser", is_flag=True, help="Open the page in a browser")
def render(graph_file: str, slug: str, output: str, config_file: str, depth: int, open_browser: bool):
    """
    Render the neighborhood of SLUG as a standalone d3 page.
    """
    document = load_document(graph_file)
    if document is None:
        raise SystemExit(1)

    config_path = Path(config_file) if config_file else DEFAULT_CONFIG_PATH
    try:
        if config_file or config_path.exists():
            config = RenderConfig.from_yaml(config_path)
        else:
            config = RenderConfig()
        if depth is not None:
            config = config.model_copy(update={"depth": depth})
    except ConfigError as e:
        echo_error(str(e))
        raise SystemExit(1)

    output_path = write_html(document, slug, output, config=config, open_browser=open_browser)
    echo_success(f"Generated: {output_path}")
    echo_info(f"Open: file://{output_path.absolute()}")
