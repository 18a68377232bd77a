"""Tests for catalog loading, source loading and persistence."""

from pathlib import Path

import pytest
from lxml import etree
from structlog.testing import capture_logs

from doc_merge.catalog import Catalog, TypeCatalogEntry, load_catalog
from doc_merge.errors import CatalogError, TypeDocumentError
from doc_merge.sources import load_source_docs
from doc_merge.writer import persist_target, serialize


# =============================================================================
# Catalog
# =============================================================================

class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_classes_and_structures_only(self, catalog):
        """Enumerations and delegates are skipped; their files are never read."""
        assert [entry.short_name for entry in catalog] == ["CCNode", "Widget", "CCPoint"]

    def test_full_names_and_paths(self, catalog, ecma_dir):
        entry = catalog.get("Widget")

        assert entry.full_name == "Cocos2D.Widget"
        assert entry.path == ecma_dir / "Cocos2D" / "Widget.xml"
        assert entry.document.getroot().get("Name") == "Widget"
        assert catalog.resolve("CCPoint") == "Cocos2D.CCPoint"
        assert catalog.resolve("CCDirection") is None

    def test_custom_kinds(self, ecma_dir):
        catalog = load_catalog(ecma_dir, kinds=["Structure"])

        assert [entry.short_name for entry in catalog] == ["CCPoint"]

    def test_missing_index_is_fatal(self, tmp_path):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(tmp_path)

        assert exc_info.value.context["path"].endswith("index.xml")
        assert exc_info.value.cause is not None

    def test_malformed_index_is_fatal(self, tmp_path):
        (tmp_path / "index.xml").write_text("<Overview><Types>")

        with pytest.raises(CatalogError):
            load_catalog(tmp_path)

    def test_index_without_types_is_fatal(self, tmp_path):
        (tmp_path / "index.xml").write_text("<Overview><Title>x</Title></Overview>")

        with pytest.raises(CatalogError, match="/Overview/Types"):
            load_catalog(tmp_path)

    def test_missing_type_document_is_fatal(self, ecma_dir):
        (ecma_dir / "Cocos2D" / "CCPoint.xml").unlink()

        with pytest.raises(TypeDocumentError) as exc_info:
            load_catalog(ecma_dir)

        assert exc_info.value.type_name == "CCPoint"
        assert isinstance(exc_info.value, CatalogError)

    def test_duplicate_short_names_rejected(self):
        doc = etree.ElementTree(etree.Element("Type"))
        entries = [
            TypeCatalogEntry("Node", "A.Node", Path("A/Node.xml"), doc),
            TypeCatalogEntry("Node", "B.Node", Path("B/Node.xml"), doc),
        ]

        with pytest.raises(CatalogError, match="Duplicate"):
            Catalog(entries)


# =============================================================================
# Source documents
# =============================================================================

class TestLoadSourceDocs:
    """Tests for load_source_docs."""

    def test_compounds_keyed_by_name(self, doxygen_dir):
        with capture_logs():
            docs = load_source_docs(doxygen_dir)

        assert sorted(docs) == ["CCNode", "Widget"]

    def test_bad_files_skipped_with_warning(self, doxygen_dir):
        with capture_logs() as logs:
            load_source_docs(doxygen_dir)

        skipped = sorted(
            Path(log["path"]).name for log in logs if log["event"] == "source_document_skipped"
        )
        assert skipped == ["protocol_c_c_broken.xml", "struct_c_c_anonymous.xml"]

    def test_prefix_filter(self, doxygen_dir):
        with capture_logs():
            docs = load_source_docs(doxygen_dir, prefixes=["struct"])

        assert dict(docs) == {}

    def test_missing_directory_is_not_fatal(self, tmp_path):
        with capture_logs() as logs:
            docs = load_source_docs(tmp_path / "nope")

        assert len(docs) == 0
        assert logs[0]["event"] == "source_root_missing"

    def test_result_is_read_only(self, doxygen_dir):
        with capture_logs():
            docs = load_source_docs(doxygen_dir)

        with pytest.raises(TypeError):
            docs["Other"] = None


# =============================================================================
# Persistence
# =============================================================================

class TestPersistTarget:
    """Tests for writing the ECMA tree back."""

    def test_writes_every_document(self, catalog, ecma_dir):
        catalog.get("CCNode").document.find("Docs/summary").text = "Changed."

        assert persist_target(catalog) == 3

        reloaded = etree.parse(str(ecma_dir / "Cocos2D" / "CCNode.xml"))
        assert reloaded.findtext("Docs/summary") == "Changed."

    def test_serialization_is_stable(self, catalog):
        data = serialize(catalog.get("Widget").document)

        assert data.startswith(b"<?xml version='1.0' encoding='utf-8'?>\n<Type")
        assert b"\r" not in data
        assert b"\n  <Docs>\n    <summary>To be added.</summary>\n" in data

    def test_new_elements_are_indented(self, catalog):
        document = catalog.get("CCPoint").document
        remarks = document.find("Docs/remarks")
        remarks.text = None
        etree.SubElement(remarks, "para").text = "New."

        data = serialize(document).decode("utf-8")

        assert "    <remarks>\n      <para>New.</para>\n    </remarks>\n" in data
