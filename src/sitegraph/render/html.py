"""
Standalone HTML export.

Renders the neighborhood of a document into a single self-contained page
driven by d3-force. The neighborhood is selected in Python; the page only
lays it out and handles hover, click, zoom and drag the same way
``GraphView`` does.
"""

import json
import logging
import webbrowser
from pathlib import Path
from typing import Any, Dict

from ..config import VISITED_STORAGE_KEY
from ..core.slugs import is_tag_slug
from ..core.types import GraphDocument
from ..graph.neighborhood import select
from ..graph.view import RuntimeGraphView
from .config import RenderConfig

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>__GRAPH_TITLE__</title>
    <script src="https://d3js.org/d3.v7.min.js"></script>
    <style>
        :root {
            --light: #faf8f8;
            --lightgray: #e5e5e5;
            --gray: #b8b8b8;
            --darkgray: #4e4e4e;
            --secondary: #284b63;
            --tertiary: #84a59d;
        }
        body {
            margin: 0;
            background: var(--light);
            color: var(--darkgray);
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        }
        #graph-container {
            width: 100vw;
            height: 100vh;
        }
        .empty-state {
            padding: 2rem;
            text-align: center;
        }
    </style>
</head>
<body>
    <div id="graph-container"></div>
    <script>
        const graphData = __GRAPH_DATA__;
        const cfg = __GRAPH_CONFIG__;
        const VISITED_KEY = __VISITED_KEY__;

        function getVisited() {
            try {
                const raw = sessionStorage.getItem(VISITED_KEY);
                const parsed = raw ? JSON.parse(raw) : [];
                return new Set(Array.isArray(parsed) ? parsed : []);
            } catch (e) {
                return new Set();
            }
        }

        function addToVisited(slug) {
            const visited = getVisited();
            visited.add(slug);
            sessionStorage.setItem(VISITED_KEY, JSON.stringify([...visited]));
        }

        function segments(slug) {
            return slug === "/" ? [] : slug.split("/").filter((s) => s.length > 0);
        }

        function relativePath(current, target) {
            const from = segments(current);
            const to = segments(target);
            let common = 0;
            while (common < from.length && common < to.length && from[common] === to[common]) {
                common++;
            }
            const up = "../".repeat(from.length - common);
            const down = to.slice(common).join("/");
            const path = up + (down ? down + "/" : "");
            return path || "./";
        }

        function renderGraph(container, slug) {
            const visited = getVisited();
            const graph = document.getElementById(container);
            if (!graph) return;
            graph.replaceChildren();

            if (!graphData.nodes.length) {
                const empty = document.createElement("div");
                empty.className = "empty-state";
                empty.textContent = "No graph data";
                graph.appendChild(empty);
                return;
            }

            const nodes = graphData.nodes.map((d) => ({ ...d }));
            const links = graphData.links.map((d) => ({ ...d }));

            const simulation = d3
                .forceSimulation(nodes)
                .force("charge", d3.forceManyBody().strength(-100 * cfg.repelForce))
                .force("link", d3.forceLink(links).id((d) => d.id).distance(cfg.linkDistance))
                .force("center", d3.forceCenter().strength(cfg.centerForce));

            const height = Math.max(graph.offsetHeight, 250);
            const width = graph.offsetWidth;

            const svg = d3
                .select("#" + container)
                .append("svg")
                .attr("width", width)
                .attr("height", height)
                .attr("viewBox", [-width / 2 / cfg.scale, -height / 2 / cfg.scale, width / cfg.scale, height / cfg.scale]);

            const link = svg
                .append("g")
                .selectAll("line")
                .data(links)
                .join("line")
                .attr("class", "link")
                .attr("stroke", "var(--lightgray)")
                .attr("stroke-width", 1);

            const graphNode = svg.append("g").selectAll("g").data(nodes).enter().append("g");

            function color(d) {
                if (d.id === slug) return "var(--secondary)";
                if (visited.has(d.id) || d.tag) return "var(--tertiary)";
                return "var(--gray)";
            }

            function nodeRadius(d) {
                const numLinks = links.filter((l) => l.source.id === d.id || l.target.id === d.id).length;
                return 2 + Math.sqrt(numLinks);
            }

            function drag() {
                function dragstarted(event, d) {
                    if (!event.active) simulation.alphaTarget(1).restart();
                    d.fx = d.x;
                    d.fy = d.y;
                }
                function dragged(event, d) {
                    d.fx = event.x;
                    d.fy = event.y;
                }
                function dragended(event, d) {
                    if (!event.active) simulation.alphaTarget(0);
                    d.fx = null;
                    d.fy = null;
                }
                const noop = () => {};
                return d3
                    .drag()
                    .on("start", cfg.drag ? dragstarted : noop)
                    .on("drag", cfg.drag ? dragged : noop)
                    .on("end", cfg.drag ? dragended : noop);
            }

            // Values captured on hover and restored on leave
            let snapshot = null;

            function restore() {
                if (!snapshot) return;
                const saved = snapshot;
                snapshot = null;
                node.each(function (d) {
                    d3.select(this).style("opacity", saved.nodes.get(d.id));
                });
                link.each(function (d, i) {
                    const [stroke, opacity] = saved.links[i];
                    d3.select(this).attr("stroke", stroke).style("opacity", opacity);
                });
                labels.each(function (d) {
                    const [opacity, fontSize] = saved.labels.get(d.id);
                    d3.select(this).style("opacity", opacity).style("font-size", fontSize);
                });
            }

            const node = graphNode
                .append("circle")
                .attr("class", "node")
                .attr("id", (d) => d.id)
                .attr("r", nodeRadius)
                .attr("fill", color)
                .style("cursor", "pointer")
                .on("click", (_, d) => {
                    addToVisited(d.id);
                    window.location.assign(relativePath(slug, d.id));
                })
                .on("mouseover", function (_, d) {
                    restore();
                    snapshot = {
                        nodes: new Map(node.data().map((n, i) => [n.id, node.nodes()[i].style.opacity || "1"])),
                        links: link.nodes().map((l) => [l.getAttribute("stroke"), l.style.opacity || "1"]),
                        labels: new Map(labels.data().map((n, i) => {
                            const el = labels.nodes()[i];
                            return [n.id, [el.style.opacity, el.style.fontSize]];
                        })),
                    };

                    const currentId = d.id;
                    const touches = (l) => l.source.id === currentId || l.target.id === currentId;
                    const connected = new Set([currentId]);
                    links.filter(touches).forEach((l) => {
                        connected.add(l.source.id);
                        connected.add(l.target.id);
                    });

                    if (cfg.focusOnHover) {
                        link.filter((l) => !touches(l)).style("opacity", 0.2);
                        node.filter((n) => !connected.has(n.id)).style("opacity", 0.2);
                        labels.filter((n) => !connected.has(n.id)).each(function () {
                            const opacity = parseFloat(this.style.opacity || "1");
                            d3.select(this).style("opacity", Math.min(opacity, 0.2));
                        });
                    }

                    link.filter(touches).attr("stroke", "var(--gray)").attr("stroke-width", 1);

                    d3.select(this.parentNode)
                        .raise()
                        .select("text")
                        .style("opacity", 1)
                        .style("font-size", cfg.fontSize * 1.5 + "em");
                })
                .on("mouseleave", restore)
                .call(drag());

            node.filter((d) => d.tag)
                .attr("stroke", color)
                .attr("stroke-width", 2)
                .attr("fill", "var(--light)");

            const labels = graphNode
                .append("text")
                .attr("dx", 0)
                .attr("dy", (d) => -nodeRadius(d) + "px")
                .attr("text-anchor", "middle")
                .text((d) => d.text)
                .style("opacity", (cfg.opacityScale - 1) / 3.75)
                .style("pointer-events", "none")
                .style("font-size", cfg.fontSize + "em")
                .raise()
                .call(drag());

            if (cfg.zoom) {
                svg.call(
                    d3
                        .zoom()
                        .extent([[0, 0], [width, height]])
                        .scaleExtent([0.25, 4])
                        .on("zoom", ({ transform }) => {
                            link.attr("transform", transform);
                            node.attr("transform", transform);
                            const scaledOpacity = Math.max((transform.k * cfg.opacityScale - 1) / 3.75, 0);
                            labels.attr("transform", transform).style("opacity", scaledOpacity);
                        }),
                );
            }

            simulation.on("tick", () => {
                link
                    .attr("x1", (d) => d.source.x)
                    .attr("y1", (d) => d.source.y)
                    .attr("x2", (d) => d.target.x)
                    .attr("y2", (d) => d.target.y);
                node.attr("cx", (d) => d.x).attr("cy", (d) => d.y);
                labels.attr("x", (d) => d.x).attr("y", (d) => d.y);
            });
        }

        renderGraph("graph-container", graphData.focal);
    </script>
</body>
</html>
"""


def _script_json(value: Any) -> str:
    """JSON safe to embed inside a <script> element."""
    return json.dumps(value).replace("</", "<\\/")


def graph_payload(document: GraphDocument, slug: str, config: RenderConfig) -> Dict[str, Any]:
    """The neighborhood of ``slug`` as d3 nodes and links."""
    view = RuntimeGraphView.from_document(document, remove_tags=config.remove_tags)
    hood = select(view, slug, config.depth, show_tags=config.show_tags)
    return {
        "focal": hood.focal,
        "nodes": [
            {"id": node, "text": view.title(node), "tag": is_tag_slug(node)}
            for node in hood.nodes
        ],
        "links": [{"source": edge.source, "target": edge.target} for edge in hood.edges],
    }


def generate_html(
    document: GraphDocument,
    slug: str,
    config: RenderConfig | None = None,
) -> str:
    """
    Generate the HTML content for the neighborhood of ``slug``.
    """
    config = config or RenderConfig()
    payload = graph_payload(document, slug, config)
    title = f"Graph: {payload['focal']}".replace("<", "&lt;").replace(">", "&gt;")

    return (
        HTML_TEMPLATE.replace("__GRAPH_TITLE__", title)
        .replace("__GRAPH_DATA__", _script_json(payload))
        .replace("__GRAPH_CONFIG__", _script_json(config.to_dataset()))
        .replace("__VISITED_KEY__", _script_json(VISITED_STORAGE_KEY))
    )


def write_html(
    document: GraphDocument,
    slug: str,
    output_path: Path | str = "graph.html",
    config: RenderConfig | None = None,
    open_browser: bool = False,
) -> Path:
    """
    Write the graph page to ``output_path`` and optionally open it.
    """
    out_file = Path(output_path)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(generate_html(document, slug, config), encoding="utf-8")
    logger.info(f"Wrote graph page to {out_file}")

    if open_browser:
        webbrowser.open(out_file.resolve().as_uri())

    return out_file
