"""
Doxygen → ECMA markup rewriting.

Rewrites an inline-markup subtree from Doxygen's dialect (``para``, ``ref``,
``itemizedlist``, ``parameterlist``, ``simplesect``...) into the ECMA dialect
used by monodoc (``see``, ``list``, ``item``, ``description``). The input tree
is never modified; every call builds a new tree.

Example:
    >>> transformer = MarkupTransformer(catalog)
    >>> result = transformer.transform(memberdef.find("detaileddescription"))
    >>> [block.tag for block in result.blocks]
    ['para']
    >>> [p.name for p in result.parameters]
    ['enabled']
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from lxml import etree

from doc_merge.catalog import Catalog
from doc_merge.logging import get_logger

logger = get_logger(__name__)

BOOLEAN_LITERALS: dict[str, str] = {"YES": "true", "NO": "false"}

LIST_STYLES = {
    "orderedlist": "number",
    "itemizedlist": "bullet",
}


def flatten_text(element: etree._Element | None) -> str:
    """Concatenate all text inside an element, excluding its own tail."""
    if element is None:
        return ""
    return "".join(element.itertext())


def _append_text(parent: etree._Element, text: str | None) -> None:
    """Append text at the current end of ``parent``'s content."""
    if not text:
        return
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


@dataclass
class ParameterDescription:
    """One documented parameter, in source order."""

    name: str
    description: etree._Element


@dataclass
class TransformResult:
    """Outcome of rewriting one markup subtree.

    Attributes:
        element: New root element, same tag as the input root
        parameters: Parameter descriptions pulled out of parameter lists
        warnings: Human-readable warnings raised while rewriting
        unhandled: Tags passed through without a rewrite rule
    """

    element: etree._Element
    parameters: list[ParameterDescription] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    unhandled: list[str] = field(default_factory=list)

    @property
    def blocks(self) -> list[etree._Element]:
        """Top-level blocks of the rewritten subtree."""
        return [child for child in self.element if isinstance(child.tag, str)]

    @property
    def text(self) -> str:
        return flatten_text(self.element)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass
class Description:
    """A rewritten detailed description together with its brief companion."""

    detailed: TransformResult | None
    brief: TransformResult | None = None

    @property
    def parameters(self) -> list[ParameterDescription]:
        return self.detailed.parameters if self.detailed is not None else []


class _Pass:
    """Per-call mutable state; the transformer itself holds none."""

    def __init__(self, booleans: bool):
        self.booleans = booleans
        self.parameters: list[ParameterDescription] = []
        self.warnings: list[str] = []
        self.unhandled: list[str] = []


class MarkupTransformer:
    """Rewrite Doxygen inline markup into ECMA documentation markup.

    Manifesto:
        The two documentation trees describe the same API, but only one of
        them is written by people. The transformer is the single place that
        knows how the two dialects map onto each other; everything it does
        not understand is carried over untouched so nothing written by hand
        is lost.

    Architecture:
        ```
        source subtree (read only)
              │
              ▼
        _rewrite_content() ──► for each child: rule table
              │                    ref          ──► <see cref="T:..."/>
              │                    orderedlist  ──► <list type="number">
              │                    itemizedlist ──► <list type="bullet">
              │                    listitem     ──► <item><description>
              │                    parameterlist──► (removed, collected)
              │                    simplesect   ──► (unwrapped)
              │                    para / other ──► copied, recursed
              ▼
        TransformResult(element, parameters, warnings, unhandled)
        ```

    Guardrails:
        - Do NOT mutate the source tree
          ✅ Every call builds new elements
        - Do NOT drop text next to removed or unwrapped nodes
          ✅ Tails are re-attached at the same position
    """

    def __init__(self, catalog: Catalog, literals: Mapping[str, str] | None = None):
        self.catalog = catalog
        self.literals = dict(BOOLEAN_LITERALS if literals is None else literals)
        self._literal_pattern = None
        if self.literals:
            alternatives = sorted(self.literals, key=len, reverse=True)
            self._literal_pattern = re.compile(
                r"\b(?:" + "|".join(re.escape(token) for token in alternatives) + r")\b"
            )

        self._rules = {
            "ref": self._rewrite_ref,
            "orderedlist": self._rewrite_list,
            "itemizedlist": self._rewrite_list,
            "listitem": self._rewrite_listitem,
            "para": self._rewrite_para,
            "parameterlist": self._rewrite_parameterlist,
            "simplesect": self._rewrite_simplesect,
        }

    def transform(
        self,
        element: etree._Element,
        booleans: bool = False,
        trace: bool = False,
    ) -> TransformResult:
        """Rewrite a markup subtree.

        Args:
            element: Root of the Doxygen subtree (e.g. ``detaileddescription``)
            booleans: Replace boolean literal tokens in text
            trace: Log the markup before and after rewriting

        Returns:
            TransformResult holding a new tree with the same root tag
        """
        if trace:
            logger.info("markup_before", xml=etree.tostring(element, encoding="unicode", with_tail=False))

        state = _Pass(booleans)
        root = etree.Element(element.tag, attrib=dict(element.attrib))
        self._rewrite_content(element, root, state)

        if trace:
            logger.info("markup_after", xml=etree.tostring(root, encoding="unicode"))

        return TransformResult(
            element=root,
            parameters=state.parameters,
            warnings=state.warnings,
            unhandled=state.unhandled,
        )

    def transform_description(
        self,
        detailed: etree._Element | None,
        brief: etree._Element | None = None,
        booleans: bool = False,
        trace: bool = False,
    ) -> Description:
        """Rewrite a detailed description and its optional brief companion."""
        return Description(
            detailed=self.transform(detailed, booleans, trace) if detailed is not None else None,
            brief=self.transform(brief, booleans, trace) if brief is not None else None,
        )

    def substitute_literals(self, text: str | None) -> str | None:
        """Replace boolean literal tokens (``YES`` → ``true``) in text."""
        if not text or self._literal_pattern is None:
            return text
        return self._literal_pattern.sub(lambda m: self.literals[m.group(0)], text)

    def _literal(self, text: str | None, state: _Pass) -> str | None:
        return self.substitute_literals(text) if state.booleans else text

    def _rewrite_content(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        _append_text(dst, self._literal(src.text, state))
        for child in src:
            if isinstance(child.tag, str):
                rule = self._rules.get(child.tag, self._rewrite_unhandled)
                rule(child, dst, state)
            # Comments and processing instructions are dropped, their tail is not.
            _append_text(dst, self._literal(child.tail, state))

    def _copy_into(self, src: etree._Element, dst: etree._Element) -> None:
        node = copy.deepcopy(src)
        node.tail = None
        dst.append(node)

    def _rewrite_ref(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        kind = src.get("kindref")
        name = flatten_text(src).strip()

        if kind != "compound":
            state.warnings.append(f"unsupported reference kind {kind!r} for {name!r}")
            logger.warning("unsupported_reference_kind", kindref=kind, name=name)
            self._copy_into(src, dst)
            return

        full_name = self.catalog.resolve(name)
        if full_name is None:
            self._copy_into(src, dst)
            return

        etree.SubElement(dst, "see", cref=f"T:{full_name}")

    def _rewrite_list(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        node = etree.SubElement(dst, "list", type=LIST_STYLES[src.tag])
        self._rewrite_content(src, node, state)

    def _rewrite_listitem(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        item = etree.SubElement(dst, "item")
        description = etree.SubElement(item, "description")
        description.text = self._literal(flatten_text(src), state)

    def _rewrite_para(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        node = etree.SubElement(dst, src.tag, attrib=dict(src.attrib))
        self._rewrite_content(src, node, state)

    def _rewrite_parameterlist(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        # Return values and exceptions share the element; only "param" lists bind to slots.
        if src.get("kind", "param") != "param":
            return

        for item in src.iterfind("parameteritem"):
            description = item.find("parameterdescription")
            if description is None:
                description = etree.Element("parameterdescription")
            for name in item.iterfind("parameternamelist/parametername"):
                state.parameters.append(ParameterDescription(
                    name=flatten_text(name).strip(),
                    description=description,
                ))

    def _rewrite_simplesect(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        self._rewrite_content(src, dst, state)

    def _rewrite_unhandled(self, src: etree._Element, dst: etree._Element, state: _Pass) -> None:
        state.unhandled.append(src.tag)
        logger.debug("unhandled_markup_kind", kind=src.tag)
        self._rewrite_para(src, dst, state)
