"""Unit tests for the standalone HTML export."""

from unittest.mock import patch

from sitegraph.core.types import DocumentEntry, GraphDocument
from sitegraph.render.config import RenderConfig
from sitegraph.render.html import generate_html, graph_payload, write_html


class TestGraphPayload:
    def test_neighborhood_nodes_and_links(self, chain_document):
        payload = graph_payload(chain_document, "b", RenderConfig())
        assert payload["focal"] == "b"
        assert {n["id"] for n in payload["nodes"]} == {"a", "b", "c"}
        assert {(l["source"], l["target"]) for l in payload["links"]} == {("a", "b"), ("b", "c")}

    def test_tag_nodes_are_flagged(self, tagged_document):
        payload = graph_payload(tagged_document, "guides/setup", RenderConfig())
        tags = {n["id"]: n for n in payload["nodes"] if n["tag"]}
        assert tags["tags/intro"]["text"] == "#intro"

    def test_respects_depth(self, chain_document):
        payload = graph_payload(chain_document, "a", RenderConfig(depth=-1))
        assert len(payload["nodes"]) == 4


class TestGenerateHtml:
    def test_embeds_data_and_config(self, chain_document):
        html = generate_html(chain_document, "b", RenderConfig(focus_on_hover=True))

        assert "d3.v7" in html
        assert '"focal": "b"' in html
        assert '"focusOnHover": true' in html
        assert '"graph-visited"' in html
        assert "__GRAPH_DATA__" not in html
        assert "__GRAPH_CONFIG__" not in html

    def test_escapes_script_terminators(self):
        doc = GraphDocument(entries={"a": DocumentEntry(title="</script><b>oops")})
        html = generate_html(doc, "a")
        assert "</script><b>oops" not in html
        assert "<\\/script><b>oops" in html


class TestWriteHtml:
    def test_writes_file(self, tmp_path, chain_document):
        out = write_html(chain_document, "b", tmp_path / "site" / "graph.html")
        assert out.exists()
        assert '"focal": "b"' in out.read_text(encoding="utf-8")

    @patch("sitegraph.render.html.webbrowser.open")
    def test_opens_browser(self, mock_open, tmp_path, chain_document):
        out = write_html(chain_document, "b", tmp_path / "graph.html", open_browser=True)
        mock_open.assert_called_once_with(out.resolve().as_uri())
