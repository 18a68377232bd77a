"""
Target type catalog.

Maps each ECMA type's short name (``CCNode``) to its fully qualified name
(``Cocos2D.CCNode``) and to the parsed type document that the merge pass
writes into.

Example:
    >>> catalog = load_catalog(Path("docs/en"))
    >>> catalog.resolve("CCNode")
    'Cocos2D.CCNode'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from lxml import etree

from doc_merge.errors import CatalogError, TypeDocumentError
from doc_merge.logging import get_logger

logger = get_logger(__name__)

INDEX_FILE = "index.xml"

# Whitespace between elements is dropped so the writer can re-indent cleanly.
TARGET_PARSER = etree.XMLParser(remove_blank_text=True)


@dataclass(frozen=True)
class TypeCatalogEntry:
    """One ECMA type known to the catalog.

    Attributes:
        short_name: Type name without namespace, the join key with Doxygen
        full_name: Namespace-qualified name used in ``T:`` cross references
        path: Location of the type document on disk
        document: Parsed type document, mutated by the merge pass
    """

    short_name: str
    full_name: str
    path: Path
    document: etree._ElementTree


class Catalog:
    """Ordered, read-only mapping of short type name to catalog entry."""

    def __init__(self, entries: Iterable[TypeCatalogEntry] = ()):
        self._entries: dict[str, TypeCatalogEntry] = {}
        for entry in entries:
            if entry.short_name in self._entries:
                raise CatalogError(
                    f"Duplicate type short name: {entry.short_name}"
                ).with_context(
                    type=entry.short_name,
                    first=self._entries[entry.short_name].full_name,
                    second=entry.full_name,
                )
            self._entries[entry.short_name] = entry

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._entries

    def __iter__(self) -> Iterator[TypeCatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, short_name: str) -> TypeCatalogEntry | None:
        return self._entries.get(short_name)

    def resolve(self, short_name: str) -> str | None:
        """Return the fully qualified name for a short name, if known."""
        entry = self._entries.get(short_name)
        return entry.full_name if entry else None


def _parse(path: Path) -> etree._ElementTree:
    return etree.parse(str(path), TARGET_PARSER)


def load_catalog(
    target_root: Path,
    kinds: Iterable[str] = ("Class", "Structure"),
) -> Catalog:
    """Build the catalog from an ECMA documentation directory.

    Args:
        target_root: Directory containing ``index.xml``
        kinds: Type kinds to include; everything else is skipped

    Returns:
        Catalog in master index order

    Raises:
        CatalogError: If the index is missing or malformed
        TypeDocumentError: If a referenced type document cannot be loaded
    """
    target_root = Path(target_root)
    index_path = target_root / INDEX_FILE
    wanted = set(kinds)

    try:
        index = _parse(index_path)
    except (OSError, etree.XMLSyntaxError) as e:
        raise CatalogError(
            f"Cannot load master index: {index_path}", cause=e
        ).with_context(path=str(index_path))

    root = index.getroot()
    if root.tag != "Overview" or root.find("Types") is None:
        raise CatalogError(
            "Master index has no /Overview/Types section"
        ).with_context(path=str(index_path))

    entries = []
    for node in root.iterfind("Types/*/Type"):
        kind = node.get("Kind")
        if kind not in wanted:
            continue

        namespace = node.getparent().get("Name")
        name = node.get("Name")
        if not namespace or not name:
            raise CatalogError(
                "Type entry without Name in master index"
            ).with_context(path=str(index_path), line=node.sourceline)

        path = target_root / namespace / f"{name}.xml"
        try:
            document = _parse(path)
        except (OSError, etree.XMLSyntaxError) as e:
            raise TypeDocumentError(name, str(path), cause=e)

        entries.append(TypeCatalogEntry(
            short_name=name,
            full_name=f"{namespace}.{name}",
            path=path,
            document=document,
        ))

    catalog = Catalog(entries)
    logger.info("catalog_loaded", root=str(target_root), types=len(catalog))
    return catalog
