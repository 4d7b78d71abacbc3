"""
Slug Normalization.

A slug is the canonical identifier of a document or tag inside the graph
document. Slugs are lower-case, use ``/`` as the only separator, never start
or end with ``/`` and never end with an ``index`` segment. The site root is
the single slug ``/``.

All functions here are pure and ``normalize_slug`` is idempotent.
"""

from pathlib import Path, PurePosixPath
from typing import List

ROOT_SLUG = "/"
TAG_PREFIX = "tags/"
INDEX_SEGMENT = "index"
DOCUMENT_SUFFIX = ".md"


def _ends_with_segment(value: str, segment: str) -> bool:
    return value == segment or value.endswith("/" + segment)


def trim_suffix(value: str, suffix: str) -> str:
    """Remove ``suffix`` when it is the last path segment of ``value``."""
    if _ends_with_segment(value, suffix):
        value = value[: -len(suffix)]
    return value


def strip_slashes(value: str, only_prefix: bool = False) -> str:
    """Remove leading (and unless ``only_prefix``, trailing) slashes."""
    value = value.lstrip("/")
    if not only_prefix:
        value = value.rstrip("/")
    return value


def normalize_slug(value: str) -> str:
    """
    Map a path or link target to its canonical slug.

    Examples:
        >>> normalize_slug("/Guides/Setup/")
        'guides/setup'
        >>> normalize_slug("reference/index")
        'reference'
        >>> normalize_slug("index")
        '/'
    """
    slug = strip_slashes(value.replace("\\", "/").lower())
    while _ends_with_segment(slug, INDEX_SEGMENT):
        slug = strip_slashes(trim_suffix(slug, INDEX_SEGMENT))
    return slug or ROOT_SLUG


def slug_for_path(path: Path | str, root: Path | str | None = None) -> str:
    """
    Compute the slug of a document file relative to the document root.

    The ``.md`` suffix is dropped before normalization, so
    ``docs/Guides/index.md`` under root ``docs`` becomes ``guides``.
    """
    posix = str(path).replace("\\", "/")
    if root is not None:
        prefix = str(root).replace("\\", "/").rstrip("/")
        if prefix and (posix == prefix or posix.startswith(prefix + "/")):
            posix = posix[len(prefix):]
    if posix.lower().endswith(DOCUMENT_SUFFIX):
        posix = posix[: -len(DOCUMENT_SUFFIX)]
    return normalize_slug(posix)


def normalize_tag(tag: str) -> str:
    """Tag names are stored trimmed and lower-cased, without the prefix."""
    return tag.strip().lower()


def tag_slug(tag: str) -> str:
    """Slug of the tag page for ``tag``, namespaced under ``tags/``."""
    return normalize_slug(TAG_PREFIX + normalize_tag(tag))


def is_tag_slug(slug: str) -> bool:
    return slug.startswith(TAG_PREFIX)


def tag_name(slug: str) -> str:
    """Inverse of ``tag_slug`` for display purposes."""
    return slug[len(TAG_PREFIX):] if is_tag_slug(slug) else slug


def last_segment(slug: str) -> str:
    """Default title for a slug: its final path segment."""
    return PurePosixPath(slug).name or slug


def relative_path(current: str, target: str) -> str:
    """
    Relative URL from the page at ``current`` to the page at ``target``.

    Pages are served as directories, so the result always ends with ``/``.
    Shared leading segments are elided and every remaining segment of
    ``current`` costs one ``../``.

    Examples:
        >>> relative_path("a/b/c", "a/d")
        '../../d/'
    """
    current_segments = _segments(current)
    target_segments = _segments(target)

    common = 0
    for i, segment in enumerate(current_segments):
        if i < len(target_segments) and segment == target_segments[i]:
            common = i + 1
        else:
            break

    back = len(current_segments) - common
    forward = "/".join(target_segments[common:])
    if forward and not forward.endswith("/"):
        forward += "/"
    return ("../" * back + forward) or "./"


def _segments(slug: str) -> List[str]:
    # The root page has no segments of its own.
    if slug == ROOT_SLUG or not slug:
        return []
    return slug.split("/")
