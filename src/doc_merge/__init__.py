"""
Doxygen → ECMA documentation merge.

Imports the documentation Doxygen extracts from Objective-C headers into the
ECMA XML documentation of a binding, matching types by name and members by
their exported selector.

Example:
    >>> from doc_merge import MergeConfig, MergeOrchestrator
    >>> config = MergeConfig(target_root="docs/en", source_root="doxygen/xml")
    >>> report = MergeOrchestrator.from_config(config).run()
"""

__version__ = "0.1.0"

from doc_merge.catalog import Catalog, TypeCatalogEntry, load_catalog
from doc_merge.config import MergeConfig
from doc_merge.errors import CatalogError, ConfigError, DocMergeError, TypeDocumentError
from doc_merge.markup import MarkupTransformer, ParameterDescription, TransformResult
from doc_merge.members import MemberMatcher, MemberSelector
from doc_merge.orchestrator import MergeOrchestrator, MergeReport
from doc_merge.parameters import ParameterAligner
from doc_merge.sources import load_source_docs
from doc_merge.writer import persist_target

__all__ = [
    "Catalog",
    "TypeCatalogEntry",
    "load_catalog",
    "MergeConfig",
    "DocMergeError",
    "CatalogError",
    "TypeDocumentError",
    "ConfigError",
    "MarkupTransformer",
    "ParameterDescription",
    "TransformResult",
    "MemberMatcher",
    "MemberSelector",
    "MergeOrchestrator",
    "MergeReport",
    "ParameterAligner",
    "load_source_docs",
    "persist_target",
    "__version__",
]
