"""
Core type definitions for sitegraph.

The graph document is a flat mapping from slug to ``DocumentEntry``. It is
produced once per build by the indexer and treated as immutable by every
runtime consumer, which only derives ephemeral views from it.
"""

from enum import StrEnum
from typing import Any, Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import GraphDocumentError
from .slugs import is_tag_slug, last_segment


class NodeKind(StrEnum):
    """Categories of nodes in the link graph."""
    DOCUMENT = "document"
    TAG = "tag"

    @classmethod
    def of(cls, slug: str) -> "NodeKind":
        return cls.TAG if is_tag_slug(slug) else cls.DOCUMENT


class DocumentEntry(BaseModel):
    """
    One node of the graph document.

    ``links`` holds outbound slugs in first-occurrence order, ``backlinks``
    the slugs that reference this entry. ``tags`` holds plain tag names;
    the matching tag entries live under ``tags/<name>``.
    """
    title: str
    content: str = ""
    links: List[str] = Field(default_factory=list)
    backlinks: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def stub(cls, slug: str) -> "DocumentEntry":
        """Placeholder for a slug referenced before (or without) being indexed."""
        return cls(title=last_segment(slug))


_ENTRIES_ADAPTER = TypeAdapter(Dict[str, DocumentEntry])


class GraphDocument(BaseModel):
    """
    The at-rest link graph: every indexed document, every link target and
    every tag, keyed by slug.
    """
    entries: Dict[str, DocumentEntry] = Field(default_factory=dict)

    def __contains__(self, slug: object) -> bool:
        return slug in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def slugs(self) -> List[str]:
        return list(self.entries)

    def get(self, slug: str) -> DocumentEntry | None:
        return self.entries.get(slug)

    def items(self) -> Iterator[Tuple[str, DocumentEntry]]:
        return iter(self.entries.items())

    @classmethod
    def from_dict(cls, data: Any) -> "GraphDocument":
        """
        Validate a decoded JSON object.

        Raises:
            GraphDocumentError: If ``data`` is not a mapping of slug to entry.
        """
        if not isinstance(data, dict):
            raise GraphDocumentError(
                f"expected a JSON object keyed by slug, got {type(data).__name__}"
            )
        try:
            entries = _ENTRIES_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise GraphDocumentError(f"invalid graph document: {e}") from e
        return cls(entries=entries)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {slug: entry.model_dump() for slug, entry in self.entries.items()}

    def backlink_violations(self) -> List[Tuple[str, str]]:
        """
        Return ``(source, target)`` pairs breaking the backlink symmetry.

        An empty list means every ``B`` in ``A.links`` lists ``A`` in its
        backlinks and no entry references itself.
        """
        violations: List[Tuple[str, str]] = []
        for slug, entry in self.entries.items():
            if slug in entry.links or slug in entry.backlinks:
                violations.append((slug, slug))
            for target in entry.links:
                target_entry = self.entries.get(target)
                if target_entry is None or slug not in target_entry.backlinks:
                    violations.append((slug, target))
        return violations


class LinkEdge(BaseModel):
    """Directed edge of the runtime view (document link or tag membership)."""
    source: str
    target: str

    model_config = ConfigDict(frozen=True)

    def touches(self, slug: str) -> bool:
        return self.source == slug or self.target == slug

    def other(self, slug: str) -> str:
        return self.target if self.source == slug else self.source
