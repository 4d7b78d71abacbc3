"""
Unit tests for the sitegraph CLI commands.
"""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from sitegraph.cli.main import main
from sitegraph.core.document import load_graph_document, write_graph_document


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def graph_file(tmp_path, chain_document):
    return write_graph_document(chain_document, tmp_path / "public" / "sitemap.json")


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    """Run from an empty working directory so no local config is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestIndexCommand:
    def test_index_writes_graph(self, runner, docs_root, tmp_path):
        output = tmp_path / "out" / "sitemap.json"
        result = runner.invoke(main, ["index", str(docs_root), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Indexed 3 documents" in result.output
        doc = load_graph_document(output)
        assert "guides/setup" in doc
        assert doc.get("/").content != ""

    def test_index_json_summary(self, runner, docs_root, tmp_path):
        output = tmp_path / "sitemap.json"
        result = runner.invoke(main, ["index", str(docs_root), "-o", str(output), "--json", "--no-content"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["meta"]["status"] == "success"
        assert payload["data"]["files_indexed"] == 3
        assert payload["data"]["entries"] == 6
        assert load_graph_document(output).get("/").content == ""

    def test_index_reports_skipped_documents(self, runner, docs_root, tmp_path):
        (docs_root / "bad.md").write_bytes(b"\xff\xfe")
        result = runner.invoke(main, ["index", str(docs_root), "-o", str(tmp_path / "s.json")])
        assert result.exit_code == 0
        assert "1 documents could not be read" in result.output

    def test_index_missing_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["index", str(tmp_path / "missing")])
        assert result.exit_code == 2


class TestNeighborsCommand:
    def test_json(self, runner, graph_file):
        result = runner.invoke(main, ["neighbors", "b", "-i", str(graph_file), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["focal"] == "b"
        assert set(payload["nodes"]) == {"a", "b", "c"}
        assert {"source": "a", "target": "b"} in payload["edges"]

    def test_slug_is_normalized(self, runner, graph_file):
        result = runner.invoke(main, ["neighbors", "/B/", "-i", str(graph_file), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["focal"] == "b"
        assert set(payload["nodes"]) == {"a", "b", "c"}

    def test_depth(self, runner, graph_file):
        result = runner.invoke(main, ["neighbors", "a", "-i", str(graph_file), "-d", "-1", "--json"])
        assert set(json.loads(result.stdout)["nodes"]) == {"a", "b", "c", "d"}

    def test_table(self, runner, graph_file):
        result = runner.invoke(main, ["neighbors", "b", "-i", str(graph_file)])
        assert result.exit_code == 0
        assert "Neighborhood of b" in result.output
        assert "3 nodes, 2 edges" in result.output

    def test_unknown_slug(self, runner, graph_file):
        result = runner.invoke(main, ["neighbors", "zzz", "-i", str(graph_file)])
        assert result.exit_code == 0
        assert "'zzz' is not in the graph" in result.output

    def test_site_directory_input(self, runner, graph_file):
        site_dir = graph_file.parent.parent
        result = runner.invoke(main, ["neighbors", "b", "-i", str(site_dir), "--json"])
        assert result.exit_code == 0

    def test_missing_graph(self, runner, tmp_path):
        result = runner.invoke(main, ["neighbors", "b", "-i", str(tmp_path / "none.json")])
        assert result.exit_code == 1
        assert "Graph file not found" in result.output

    def test_malformed_graph(self, runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2, 3]")
        result = runner.invoke(main, ["neighbors", "b", "-i", str(bad)])
        assert result.exit_code == 1
        assert "Failed to load graph" in result.output


class TestBacklinksCommand:
    def test_lists_sources(self, runner, graph_file):
        result = runner.invoke(main, ["backlinks", "c", "-i", str(graph_file)])
        assert result.exit_code == 0
        assert "Backlinks to c" in result.output
        assert "B" in result.output

    def test_no_backlinks(self, runner, graph_file):
        result = runner.invoke(main, ["backlinks", "A", "-i", str(graph_file)])
        assert result.exit_code == 0
        assert "No documents link to 'a'" in result.output

    def test_unknown_slug(self, runner, graph_file):
        result = runner.invoke(main, ["backlinks", "zzz", "-i", str(graph_file)])
        assert result.exit_code == 1


class TestRenderCommand:
    def test_render_html(self, runner, graph_file, in_tmp):
        output = in_tmp / "graph.html"
        result = runner.invoke(main, ["render", "b", "-i", str(graph_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Generated" in result.output
        assert '"focal": "b"' in output.read_text(encoding="utf-8")

    def test_render_with_config_and_depth(self, runner, graph_file, in_tmp):
        config = in_tmp / "graph.yaml"
        config.write_text(yaml.dump({"linkDistance": 80}))
        output = in_tmp / "graph.html"

        result = runner.invoke(main, [
            "render", "a", "-i", str(graph_file), "-o", str(output), "-c", str(config), "-d", "-1",
        ])

        assert result.exit_code == 0, result.output
        html = output.read_text(encoding="utf-8")
        assert '"linkDistance": 80' in html
        assert '"depth": -1' in html
        assert '"id": "d"' in html

    def test_render_invalid_config(self, runner, graph_file, in_tmp):
        config = in_tmp / "graph.yaml"
        config.write_text(yaml.dump({"fontSize": -1}))
        result = runner.invoke(main, ["render", "b", "-i", str(graph_file), "-c", str(config)])
        assert result.exit_code == 1
        assert "Invalid graph configuration" in result.output


class TestInitCommand:
    def test_init_writes_defaults(self, runner, tmp_path):
        result = runner.invoke(main, ["init", str(tmp_path)])

        assert result.exit_code == 0
        config_path = tmp_path / ".sitegraph" / "graph.yaml"
        with open(config_path) as f:
            config = yaml.safe_load(f)
        assert config["repelForce"] == 0.5
        assert config["depth"] == 1
        assert config["removeTags"] == []

    def test_init_does_not_overwrite(self, runner, tmp_path):
        config_path = tmp_path / ".sitegraph" / "graph.yaml"
        config_path.parent.mkdir()
        config_path.write_text("depth: 4\n")

        result = runner.invoke(main, ["init", str(tmp_path)])
        assert "already exists" in result.output
        assert config_path.read_text() == "depth: 4\n"

        runner.invoke(main, ["init", str(tmp_path), "--force"])
        assert yaml.safe_load(config_path.read_text())["depth"] == 1

    def test_render_picks_up_init_config(self, runner, graph_file, in_tmp):
        runner.invoke(main, ["init", str(in_tmp)])
        result = runner.invoke(main, ["render", "b", "-i", str(graph_file), "-o", "g.html"])
        assert result.exit_code == 0
        assert Path("g.html").exists()
