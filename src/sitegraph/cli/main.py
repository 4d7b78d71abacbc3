"""
sitegraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import backlinks, index, init, neighbors, render, watch


@click.group()
@click.version_option(package_name="sitegraph")
def main():
    """sitegraph: Link graphs for Markdown documentation sites.

    Indexes cross-references between documents into a graph document and
    renders the neighborhood of any page as an interactive graph.

    \b
    Quick Start:
      sitegraph index ./docs
      sitegraph neighbors guides/setup --depth 2
      sitegraph render guides/setup -o graph.html
    """
    pass


# Register commands
main.add_command(index.index)
main.add_command(watch.watch)
main.add_command(neighbors.neighbors)
main.add_command(backlinks.backlinks)
main.add_command(render.render)
main.add_command(init.init)

if __name__ == "__main__":
    main()
