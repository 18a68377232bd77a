"""
Configuration for doc-merge.

Manages the settings for loading both documentation trees, matching export
selectors, and rewriting markup.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from doc_merge.errors import ConfigError


@dataclass
class MergeConfig:
    """Configuration for a merge run.

    Attributes:
        target_root: Directory holding the ECMA index.xml and type documents
        source_root: Directory holding the Doxygen XML output
        type_kinds: ECMA type kinds taken into the catalog
        source_prefixes: Doxygen file name prefixes that hold compounds
        export_attributes: Attribute names whose first argument is the export selector
        boolean_literals: Source literal -> target literal substitutions
        boolean_types: Parameter types that receive boolean substitution
        booleans_in_paragraphs: Also substitute literals in description paragraphs
        trace_types: Type names whose markup is logged before/after rewriting
        dry_run: Merge in memory without writing the target tree back
    """

    target_root: Path | None = None
    source_root: Path | None = None

    type_kinds: list[str] = field(default_factory=lambda: ["Class", "Structure"])
    source_prefixes: list[str] = field(default_factory=lambda: [
        "interface", "protocol", "struct", "class",
    ])
    export_attributes: list[str] = field(default_factory=lambda: [
        "MonoTouch.Foundation.Export",
        "Foundation.Export",
    ])

    boolean_literals: dict[str, str] = field(default_factory=lambda: {
        "YES": "true",
        "NO": "false",
    })
    boolean_types: list[str] = field(default_factory=lambda: ["System.Boolean", "bool"])
    booleans_in_paragraphs: bool = False

    trace_types: set[str] = field(default_factory=set)
    dry_run: bool = False

    def __post_init__(self):
        """Convert paths to Path objects if strings."""
        if isinstance(self.target_root, str):
            self.target_root = Path(self.target_root)
        if isinstance(self.source_root, str):
            self.source_root = Path(self.source_root)
        if not isinstance(self.trace_types, set):
            self.trace_types = set(self.trace_types or ())

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "MergeConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            MergeConfig instance

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Cannot read configuration: {yaml_path}", cause=e
            ).with_context(path=str(yaml_path))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                "Configuration must be a mapping"
            ).with_context(path=str(yaml_path))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MergeConfig":
        """Create config from dictionary.

        Raises:
            ConfigError: If the dictionary contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {', '.join(unknown)}"
            ).with_context(keys=unknown)
        return cls(**data)

    def merged_with(self, **overrides: Any) -> "MergeConfig":
        """Return a copy with every non-None override applied."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "target_root": str(self.target_root) if self.target_root else None,
            "source_root": str(self.source_root) if self.source_root else None,
            "type_kinds": list(self.type_kinds),
            "source_prefixes": list(self.source_prefixes),
            "export_attributes": list(self.export_attributes),
            "boolean_literals": dict(self.boolean_literals),
            "boolean_types": list(self.boolean_types),
            "booleans_in_paragraphs": self.booleans_in_paragraphs,
            "trace_types": sorted(self.trace_types),
            "dry_run": self.dry_run,
        }

    def is_traced(self, type_name: str) -> bool:
        """Check whether markup for a type should be traced."""
        return type_name in self.trace_types


# Default configuration
DEFAULT_CONFIG = MergeConfig()
