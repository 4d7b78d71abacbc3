"""
Init Command - Write a graph configuration file.

Bootstraps ``.sitegraph/graph.yaml`` with every render option at its
default so it can be edited in place.
"""

from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.panel import Panel

from ...config import DEFAULT_CONFIG_PATH
from ...render import RenderConfig
from ..utils import echo_warning

console = Console()


@click.command()
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing configuration")
def init(directory: str, force: bool):
    """
    Create .sitegraph/graph.yaml with the default graph options.
    """
    root_dir = Path(directory)
    config_file = root_dir / DEFAULT_CONFIG_PATH

    if config_file.exists() and not force:
        echo_warning(f"{config_file} already exists. Use --force to overwrite.")
        return

    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(RenderConfig().to_dataset(), f, default_flow_style=False, sort_keys=False)

    console.print(
        Panel.fit(
            f"[bold green]Initialized sitegraph[/bold green]\n\n"
            f"Config: [cyan]{config_file}[/cyan]\n"
            f"Next: [bold]sitegraph index ./docs[/bold]",
            border_style="green",
        )
    )
