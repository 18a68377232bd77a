"""Pytest configuration and shared fixtures."""

import shutil
from pathlib import Path

import pytest
import structlog
from lxml import etree

from doc_merge.catalog import Catalog, TypeCatalogEntry, load_catalog
from doc_merge.sources import load_source_docs


@pytest.fixture(scope="session")
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def doxygen_dir(fixtures_path):
    """Doxygen XML directory (read only)."""
    return fixtures_path / "doxygen"


@pytest.fixture
def ecma_dir(fixtures_path, tmp_path):
    """Writable copy of the ECMA documentation tree."""
    target = tmp_path / "ecma"
    shutil.copytree(fixtures_path / "ecma", target)
    return target


@pytest.fixture
def catalog(ecma_dir):
    """Catalog loaded from the writable ECMA tree."""
    return load_catalog(ecma_dir)


@pytest.fixture
def sources(doxygen_dir):
    """Doxygen source set."""
    return load_source_docs(doxygen_dir)


@pytest.fixture
def memory_catalog():
    """Catalog with in-memory documents only, for markup tests."""
    def entry(name):
        return TypeCatalogEntry(
            short_name=name,
            full_name=f"Cocos2D.{name}",
            path=Path(f"{name}.xml"),
            document=etree.ElementTree(etree.Element("Type", Name=name)),
        )

    return Catalog([entry("CCNode"), entry("CCSprite")])


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


