"""
Doxygen source documents.

Loads the XML output of Doxygen and keys each compound document by its
compound name. Files that do not look like compound documents are skipped;
loading never fails the run.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from lxml import etree

from doc_merge.logging import get_logger

logger = get_logger(__name__)

COMPOUND_NAME_PATH = "compounddef/compoundname"

SourceDocSet = Mapping[str, etree._ElementTree]


def load_source_docs(
    source_root: Path,
    prefixes: Iterable[str] = ("interface", "protocol", "struct", "class"),
) -> SourceDocSet:
    """Load every compound document under a Doxygen XML directory.

    Args:
        source_root: Directory with Doxygen ``*.xml`` files
        prefixes: File name prefixes of compound documents

    Returns:
        Read-only mapping of compound name to parsed document
    """
    source_root = Path(source_root)
    prefixes = tuple(prefixes)
    docs: dict[str, etree._ElementTree] = {}

    if not source_root.is_dir():
        logger.warning("source_root_missing", path=str(source_root))
        return MappingProxyType(docs)

    for path in sorted(source_root.glob("*.xml")):
        if not path.name.startswith(prefixes):
            continue

        try:
            doc = etree.parse(str(path))
        except (OSError, etree.XMLSyntaxError) as e:
            logger.warning("source_document_skipped", path=str(path), reason=str(e))
            continue

        name = doc.getroot().findtext(COMPOUND_NAME_PATH)
        if not name or not name.strip():
            logger.warning("source_document_skipped", path=str(path), reason="no compound name")
            continue

        docs[name.strip()] = doc

    logger.info("source_docs_loaded", root=str(source_root), compounds=len(docs))
    return MappingProxyType(docs)
