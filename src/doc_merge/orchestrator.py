"""
Merge Orchestrator.

Drives the merge of Doxygen documentation into the ECMA tree: type-level docs
first, then every property and function member, then parameter slots.

Example:
    >>> orchestrator = MergeOrchestrator.from_config(config)
    >>> report = orchestrator.run()
    >>> report.members_matched
    42
"""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from lxml import etree

from doc_merge.catalog import Catalog, TypeCatalogEntry, load_catalog
from doc_merge.config import MergeConfig
from doc_merge.errors import ConfigError
from doc_merge.logging import LogContext, get_logger
from doc_merge.markup import Description, MarkupTransformer, TransformResult, flatten_text
from doc_merge.members import MemberKind, MemberMatcher
from doc_merge.parameters import ParameterAligner
from doc_merge.sources import SourceDocSet, load_source_docs
from doc_merge.writer import persist_target

logger = get_logger(__name__)


@dataclass
class MergeReport:
    """Counters and diagnostics collected over one merge pass."""

    types_merged: int = 0
    types_without_source: list[str] = field(default_factory=list)
    members_matched: int = 0
    unmatched_members: list[tuple[str, str]] = field(default_factory=list)
    parameters_bound: int = 0
    warnings: list[str] = field(default_factory=list)
    unhandled_kinds: Counter = field(default_factory=Counter)
    files_written: int = 0

    def record(self, result: TransformResult | None) -> None:
        if result is None:
            return
        self.warnings.extend(result.warnings)
        self.unhandled_kinds.update(result.unhandled)

    def to_dict(self) -> dict[str, Any]:
        return {
            "types_merged": self.types_merged,
            "types_without_source": list(self.types_without_source),
            "members_matched": self.members_matched,
            "unmatched_members": [f"{t}.{m}" for t, m in self.unmatched_members],
            "parameters_bound": self.parameters_bound,
            "warnings": list(self.warnings),
            "unhandled_kinds": dict(self.unhandled_kinds),
            "files_written": self.files_written,
        }


def _ensure_child(parent: etree._Element, tag: str) -> etree._Element:
    node = parent.find(tag)
    if node is None:
        node = etree.SubElement(parent, tag)
    return node


def _clear(node: etree._Element) -> None:
    node.text = None
    for child in list(node):
        node.remove(child)


def _fill_inline(slot: etree._Element, blocks: list[etree._Element]) -> None:
    """Replace a slot's content with the inline content of the given blocks."""
    _clear(slot)
    for i, block in enumerate(blocks):
        if i:
            _append(slot, " ")
        _append(slot, block.text)
        for child in block:
            slot.append(copy.deepcopy(child))


def _fill_blocks(slot: etree._Element, blocks: list[etree._Element]) -> None:
    """Replace a slot's content with copies of the given blocks."""
    _clear(slot)
    for block in blocks:
        node = copy.deepcopy(block)
        node.tail = None
        slot.append(node)


def _append(slot: etree._Element, text: str | None) -> None:
    if not text:
        return
    if len(slot):
        slot[-1].tail = (slot[-1].tail or "") + text
    else:
        slot.text = (slot.text or "") + text


def _has_content(block: etree._Element) -> bool:
    return len(block) > 0 or bool(flatten_text(block).strip())


def plug(target: etree._Element, description: Description) -> bool:
    """Write a rewritten description into ``target``'s summary and remarks.

    The summary takes the brief description when it has any text, otherwise
    the first top-level block of the detailed description. The remarks always
    take every top-level block of the detailed description. Blocks left empty
    by the rewrite (a paragraph that only held a parameter list) are skipped.

    Args:
        target: ECMA element owning a ``Docs`` child (``Type`` or ``Member``)
        description: Rewritten detailed/brief pair

    Returns:
        True if anything was written
    """
    blocks = description.detailed.blocks if description.detailed is not None else []
    blocks = [block for block in blocks if _has_content(block)]
    brief = description.brief
    has_brief = brief is not None and not brief.is_blank

    if not blocks and not has_brief:
        return False

    docs = _ensure_child(target, "Docs")
    summary = _ensure_child(docs, "summary")

    if has_brief:
        _fill_inline(summary, brief.blocks or [brief.element])
    else:
        _fill_inline(summary, blocks[:1])

    if blocks:
        _fill_blocks(_ensure_child(docs, "remarks"), blocks)

    return True


class MergeOrchestrator:
    """Merge a Doxygen source set into an ECMA catalog.

    Manifesto:
        Every run recomputes summaries and remarks from the Doxygen side.
        Nothing in the ECMA tree is treated as authoritative except its
        structure: which types exist, which members they have, and which
        selectors those members export.

    Architecture:
        ```
        MergeOrchestrator.run()
              │
              ├──► merge()
              │      for each catalog type with Doxygen docs:
              │         ├──► plug type summary/remarks
              │         └──► for each property, then each function:
              │                 ├──► MemberMatcher.match()   (warn + skip on miss)
              │                 ├──► plug member summary/remarks
              │                 └──► ParameterAligner.align()
              │
              └──► persist_target()   (skipped on dry run)
        ```

    Guardrails:
        - Do NOT abort a type because one member failed to match
          ✅ Warn, record in the report, continue
        - Do NOT write anything before the whole pass has run
          ✅ Persistence happens once, at the end

    Tags:
        - orchestrator
        - merge
    """

    def __init__(
        self,
        catalog: Catalog,
        sources: SourceDocSet,
        config: MergeConfig | None = None,
    ):
        self.catalog = catalog
        self.sources = sources
        self.config = config or MergeConfig()

        self.transformer = MarkupTransformer(catalog, self.config.boolean_literals)
        self.aligner = ParameterAligner(self.transformer, self.config.boolean_types)
        self.report = MergeReport()

    @classmethod
    def from_config(cls, config: MergeConfig) -> "MergeOrchestrator":
        """Load both trees as configured.

        Raises:
            ConfigError: If either root directory is not configured
            CatalogError: If the ECMA catalog cannot be built
        """
        if config.target_root is None or config.source_root is None:
            raise ConfigError("Both target_root and source_root are required")

        catalog = load_catalog(config.target_root, config.type_kinds)
        sources = load_source_docs(config.source_root, config.source_prefixes)
        return cls(catalog, sources, config)

    def run(self) -> MergeReport:
        """Merge, then write the ECMA tree back unless this is a dry run."""
        report = self.merge()
        if self.config.dry_run:
            logger.info("dry_run", files_written=0)
        else:
            report.files_written = persist_target(self.catalog)
        return report

    def merge(self) -> MergeReport:
        """Merge every catalog type that has Doxygen docs."""
        self.report = MergeReport()

        for entry in self.catalog:
            source = self.sources.get(entry.short_name)
            if source is None:
                self.report.types_without_source.append(entry.short_name)
                logger.debug("no_source_docs", type=entry.short_name)
                continue

            with LogContext(type=entry.short_name):
                self.merge_type(entry, source)

        logger.info(
            "merge_completed",
            types=self.report.types_merged,
            members=self.report.members_matched,
            unmatched=len(self.report.unmatched_members),
        )
        return self.report

    def merge_type(self, entry: TypeCatalogEntry, source: etree._ElementTree) -> None:
        """Merge one type: type-level docs, then members."""
        compound = source.getroot().find("compounddef")
        if compound is None:
            logger.warning("compounddef_missing", type=entry.short_name)
            return

        trace = self.config.is_traced(entry.short_name)
        description = self._describe(compound, trace)
        plug(entry.document.getroot(), description)

        matcher = MemberMatcher.for_document(
            entry.short_name, entry.document, self.config.export_attributes
        )
        for kind in (MemberKind.PROPERTY, MemberKind.FUNCTION):
            for memberdef in compound.iterfind(f"sectiondef/memberdef[@kind='{kind.value}']"):
                self._merge_member(matcher, kind, memberdef, trace)

        self.report.types_merged += 1

    def _merge_member(
        self,
        matcher: MemberMatcher,
        kind: MemberKind,
        memberdef: etree._Element,
        trace: bool,
    ) -> None:
        name = (memberdef.findtext("name") or "").strip()
        match = matcher.match(kind, name)
        if match is None:
            self.report.unmatched_members.append((matcher.type_name, name))
            return

        self.report.members_matched += 1
        description = self._describe(memberdef, trace)
        plug(match.element, description)

        if kind is MemberKind.FUNCTION:
            slots = match.parameters()
            if slots:
                self.report.parameters_bound += self.aligner.align(
                    description.parameters,
                    slots,
                    member=f"{matcher.type_name}.{name}",
                    trace=trace,
                )

    def _describe(self, owner: etree._Element, trace: bool) -> Description:
        description = self.transformer.transform_description(
            owner.find("detaileddescription"),
            owner.find("briefdescription"),
            booleans=self.config.booleans_in_paragraphs,
            trace=trace,
        )
        self.report.record(description.detailed)
        self.report.record(description.brief)
        return description
