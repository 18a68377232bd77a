"""Write merged ECMA documents back to disk."""

from __future__ import annotations

from pathlib import Path

from lxml import etree

from doc_merge.catalog import Catalog
from doc_merge.logging import get_logger

logger = get_logger(__name__)


def serialize(document: etree._ElementTree) -> bytes:
    """Serialize a document with two-space indentation and ``\\n`` line endings.

    Documents are parsed without blank text, so libxml2's pretty printer
    re-indents element-only content and leaves mixed content alone.
    """
    return etree.tostring(
        document,
        pretty_print=True,
        xml_declaration=True,
        encoding="utf-8",
    )


def write_document(document: etree._ElementTree, path: Path) -> int:
    """Write one document; returns the number of bytes written."""
    data = serialize(document)
    Path(path).write_bytes(data)
    return len(data)


def persist_target(catalog: Catalog) -> int:
    """Write every catalog document back to its original location.

    Returns:
        Number of files written
    """
    written = 0
    for entry in catalog:
        size = write_document(entry.document, entry.path)
        logger.debug("document_written", path=str(entry.path), bytes=size)
        written += 1

    logger.info("target_persisted", files=written)
    return written
