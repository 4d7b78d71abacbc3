"""
Graph Document IO.

The graph document is written once per build as a single JSON object and
read many times. Writes go to a temporary file in the destination directory
followed by ``os.replace``, so readers only ever see a complete artifact.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from .errors import GraphDocumentError
from .types import GraphDocument

logger = logging.getLogger(__name__)


def loads_graph_document(text: str, source: str | None = None) -> GraphDocument:
    """Parse and validate a graph document from its JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GraphDocumentError(f"not valid JSON ({e})", path=source) from e
    try:
        return GraphDocument.from_dict(data)
    except GraphDocumentError as e:
        raise GraphDocumentError(str(e), path=source) from e


def load_graph_document(path: Path | str) -> GraphDocument:
    """
    Read a graph document from disk.

    Raises:
        GraphDocumentError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise GraphDocumentError(f"cannot read graph document ({e})", path=str(path)) from e
    return loads_graph_document(text, source=str(path))


def dumps_graph_document(document: GraphDocument) -> str:
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False)


def write_graph_document(document: GraphDocument, path: Path | str) -> Path:
    """Atomically replace ``path`` with the serialized document."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = dumps_graph_document(document)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Wrote graph document with {len(document)} entries to {path}")
    return path
