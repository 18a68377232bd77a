"""
Structured error types for doc-merge.

Only a handful of conditions stop a merge run: the target catalog cannot be
built, or the configuration cannot be read. Everything that goes wrong at the
level of a single member or markup node is logged and skipped instead, so the
hierarchy stays small.

Architecture:
    ::

        DocMergeError  (category, context, cause)
              │
              ├── CatalogError        (CATALOG)
              │       └── TypeDocumentError
              │
              └── ConfigError         (CONFIG)

Examples:
    >>> error = CatalogError("index.xml not found").with_context(path="docs/en")
    >>> error.to_dict()["context"]
    {'path': 'docs/en'}

Tags:
    error-handling, exception-hierarchy, doc-merge
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for reporting."""

    CATALOG = "CATALOG"      # Target index or type documents
    CONFIG = "CONFIG"        # Missing or invalid settings
    INTERNAL = "INTERNAL"    # Bugs, unexpected state


class DocMergeError(Exception):
    """Base exception for all doc-merge errors.

    Every error carries a category, a free-form context dict for logging,
    and the underlying exception when there is one.

    Examples:
        >>> try:
        ...     raise OSError("disk gone")
        ... except OSError as e:
        ...     err = DocMergeError("write failed", cause=e)
        >>> err.category.value
        'INTERNAL'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DocMergeError:
        """Add context to this error (fluent API).

        Usage:
            raise CatalogError("Bad index").with_context(path=str(index_path))
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class CatalogError(DocMergeError):
    """The target master index is missing or malformed."""

    default_category = ErrorCategory.CATALOG


class TypeDocumentError(CatalogError):
    """A type document referenced by the master index cannot be loaded."""

    def __init__(self, type_name: str, path: str, cause: BaseException | None = None):
        self.type_name = type_name
        self.path = path
        super().__init__(
            f"Cannot load document for type {type_name}: {path}",
            context={"type": type_name, "path": path},
            cause=cause,
        )


class ConfigError(DocMergeError):
    """Configuration could not be read or contains unknown settings."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "DocMergeError",
    "CatalogError",
    "TypeDocumentError",
    "ConfigError",
]
