"""Unit tests for the runtime view and neighborhood selection."""

from sitegraph.core.types import DocumentEntry, GraphDocument
from sitegraph.graph.neighborhood import select
from sitegraph.graph.view import RuntimeGraphView


class TestRuntimeGraphView:
    def test_edges_follow_links(self, chain_document):
        view = RuntimeGraphView.from_document(chain_document)
        assert view.node_count == 4
        assert view.edge_count == 3
        assert view.outgoing("b") == ["c"]
        assert view.incoming("b") == ["a"]
        assert sorted(view.neighbors("b")) == ["a", "c"]

    def test_dangling_links_are_dropped(self):
        doc = GraphDocument(entries={"a": DocumentEntry(title="A", links=["ghost"])})
        view = RuntimeGraphView.from_document(doc)
        assert not view.has_node("ghost")
        assert view.edge_count == 0

    def test_tag_edges(self, tagged_document):
        view = RuntimeGraphView.from_document(tagged_document)
        assert view.tag_slugs() == ["tags/intro", "tags/internal"]
        assert "tags/intro" in view.outgoing("guides/setup")
        assert view.title("tags/intro") == "#intro"
        assert view.title("guides/setup") == "Setup"

    def test_removed_tags(self, tagged_document):
        view = RuntimeGraphView.from_document(tagged_document, remove_tags=["internal"])
        assert not view.has_node("tags/internal")
        assert view.outgoing("reference/api") == ["tags/intro"]

    def test_keys_are_renormalized(self):
        doc = GraphDocument(entries={
            "Guides/Index": DocumentEntry(title="Guides", links=["/"]),
            "index": DocumentEntry(title="Home"),
        })
        view = RuntimeGraphView.from_document(doc)
        assert view.has_node("guides")
        assert view.outgoing("guides") == ["/"]


class TestSelect:
    def test_chain_depth_one(self, chain_document):
        view = RuntimeGraphView.from_document(chain_document)
        hood = select(view, "b", 1)
        assert set(hood.nodes) == {"a", "b", "c"}
        assert "d" not in hood
        assert {(e.source, e.target) for e in hood.edges} == {("a", "b"), ("b", "c")}

    def test_chain_depth_two(self, chain_document):
        view = RuntimeGraphView.from_document(chain_document)
        assert set(select(view, "a", 2).nodes) == {"a", "b", "c"}
        assert set(select(view, "a", 3).nodes) == {"a", "b", "c", "d"}

    def test_depth_zero(self, chain_document):
        view = RuntimeGraphView.from_document(chain_document)
        for slug in ["a", "b", "c", "d"]:
            hood = select(view, slug, 0)
            assert hood.nodes == [slug]
            assert hood.edges == []

    def test_negative_depth_is_whole_graph(self, tagged_document):
        view = RuntimeGraphView.from_document(tagged_document)
        hood = select(view, "guides/setup", -1)
        assert set(hood.nodes) == {"guides/setup", "reference/api", "tags/intro", "tags/internal"}
        assert len(hood.edges) == view.edge_count

    def test_negative_depth_without_tags(self, tagged_document):
        view = RuntimeGraphView.from_document(tagged_document)
        hood = select(view, "guides/setup", -1, show_tags=False)
        assert set(hood.nodes) == {"guides/setup", "reference/api"}
        assert all(not e.target.startswith("tags/") for e in hood.edges)

    def test_show_tags_false_blocks_traversal_through_tags(self, tagged_document):
        doc = tagged_document.model_copy(deep=True)
        doc.entries["other"] = DocumentEntry(title="Other", tags=["internal"])
        view = RuntimeGraphView.from_document(doc)

        with_tags = select(view, "reference/api", 2)
        without_tags = select(view, "reference/api", 2, show_tags=False)
        assert "other" in with_tags
        assert "other" not in without_tags
        assert all(not n.startswith("tags/") for n in without_tags.nodes)

    def test_missing_focal(self, chain_document):
        view = RuntimeGraphView.from_document(chain_document)
        hood = select(view, "/nowhere/", 2)
        assert hood.focal == "nowhere"
        assert hood.nodes == ["nowhere"]
        assert hood.edges == []

    def test_deterministic(self, chain_document):
        view = RuntimeGraphView.from_document(chain_document)
        assert select(view, "b", 2).nodes == select(view, "b", 2).nodes

    def test_degree_and_adjacent(self, chain_document):
        hood = select(RuntimeGraphView.from_document(chain_document), "b", 1)
        assert hood.degree("b") == 2
        assert hood.degree("a") == 1
        assert hood.adjacent("a") == {"a", "b"}
