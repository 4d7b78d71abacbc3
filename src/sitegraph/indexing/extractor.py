"""
Link Extractor.

Recovers outbound reference targets and frontmatter metadata from the raw
text of one Markdown document. Nothing here touches the filesystem; the
indexer owns reading files and normalizing the returned targets into slugs.
"""

import logging
import re
from typing import Any, Dict, List, Tuple

import yaml

from ..config import is_external_target
from ..core.slugs import normalize_tag

logger = logging.getLogger(__name__)

# [label](target) - non-greedy on both sides, images included
LINK_PATTERN = re.compile(r"\[.*?\]\((.*?)\)")

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


class FrontmatterError(ValueError):
    """The YAML block at the top of a document could not be parsed."""


def to_directory_target(target: str) -> str:
    """
    Reduce a kept link target to the slug-like path of its directory.

    A reference to ``a/b/c`` is recorded as a reference to ``a/b``. Pages are
    served as directories, so relative up-level segments are collapsed away
    instead of being resolved against the linking page.

    Examples:
        >>> to_directory_target("./foo/bar.md")
        'foo'
        >>> to_directory_target("../../reference/classes/App/")
        'reference/classes/App'
    """
    segments = target.split("/")[:-1]
    while segments and segments[0] in (".", ".."):
        segments.pop(0)
    return "/".join(segments).lstrip("/")


def _link_target(raw: str) -> str:
    # [x](target "title") - the target is the first token
    parts = raw.strip().split()
    return parts[0] if parts else ""


def extract_links(text: str) -> List[str]:
    """
    Return outbound targets of ``text`` in first-occurrence order.

    External (scheme or protocol-relative) targets and in-page anchors are
    dropped. Duplicates are kept; deduplication happens in the indexer.
    """
    targets: List[str] = []
    for match in LINK_PATTERN.finditer(text or ""):
        target = _link_target(match.group(1))
        if not target or target.startswith("#") or is_external_target(target):
            continue
        directory = to_directory_target(target)
        # A bare file name has no directory slug to point at
        if directory:
            targets.append(directory)
    return targets


def extract_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into its YAML frontmatter and body.

    Raises:
        FrontmatterError: If a frontmatter block exists but is not valid YAML
            or not a mapping.
    """
    text = (text or "").lstrip("\ufeff")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"invalid frontmatter: {e}") from e
    if not isinstance(data, dict):
        raise FrontmatterError("frontmatter must be a mapping")
    return data, text[match.end():]


def extract_tags(metadata: Dict[str, Any]) -> List[str]:
    """Tag names from frontmatter; accepts a list or a comma separated string."""
    raw = metadata.get("tags")
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    elif not isinstance(raw, (list, tuple)):
        logger.debug(f"Ignoring tags of unsupported type {type(raw).__name__}")
        return []

    seen: Dict[str, None] = {}
    for tag in raw:
        name = normalize_tag(str(tag))
        if name:
            seen.setdefault(name, None)
    return list(seen)
