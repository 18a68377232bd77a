"""
Export-selector matching between Doxygen members and ECMA members.

ECMA members record the Objective-C selector they bind to in their attribute
metadata, e.g. ``get: MonoTouch.Foundation.Export("enabled")`` for a property
getter or ``MonoTouch.Foundation.Export("setEnabled:")`` for a method. The
index parses those strings once into ``(accessor, export_name)`` keys; lookups
then try an ordered list of accessors for each Doxygen member kind.

Example:
    >>> matcher = MemberMatcher.for_document("CCNode", document)
    >>> match = matcher.match("function", "setEnabled:")
    >>> str(match.selector)
    'setEnabled:'
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from lxml import etree

from doc_merge.logging import get_logger

logger = get_logger(__name__)

DEFAULT_EXPORT_ATTRIBUTES = ("MonoTouch.Foundation.Export", "Foundation.Export")

_ATTRIBUTE_NAME = re.compile(
    r'^(?:(?P<accessor>get|set): )?(?P<attribute>[\w.]+)\("(?P<export>[^"]*)"(?:,[^)]*)?\)$'
)


class Accessor(str, Enum):
    """How an ECMA member exposes a native selector."""

    METHOD = ""
    GETTER = "get"
    SETTER = "set"


class MemberKind(str, Enum):
    """Doxygen ``memberdef`` kinds the merge understands."""

    PROPERTY = "property"
    FUNCTION = "function"


# Ordered lookup strategies per member kind; bindings sometimes surface a
# native method as a managed property, hence the getter fallback.
LOOKUP_STRATEGIES: dict[MemberKind, tuple[Accessor, ...]] = {
    MemberKind.PROPERTY: (Accessor.GETTER,),
    MemberKind.FUNCTION: (Accessor.METHOD, Accessor.GETTER),
}


@dataclass(frozen=True)
class MemberSelector:
    """Structured export selector: accessor plus exported native name."""

    accessor: Accessor
    export_name: str

    def __str__(self) -> str:
        if self.accessor is Accessor.METHOD:
            return self.export_name
        return f"{self.accessor.value}: {self.export_name}"


@dataclass(frozen=True)
class TargetParameter:
    """One named parameter slot of an ECMA member, in declaration order."""

    name: str
    type: str
    element: etree._Element | None


@dataclass
class MemberMatch:
    """A Doxygen member resolved to its ECMA member."""

    selector: MemberSelector
    element: etree._Element

    @property
    def member_name(self) -> str | None:
        return self.element.get("MemberName")

    def parameters(self) -> list[TargetParameter]:
        """Parameter slots in declaration order.

        The slot element is ``Docs/param[@name]``; it is None when the
        member declares the parameter but has no doc stub for it.
        """
        docs = self.element.find("Docs")
        slots = {}
        if docs is not None:
            slots = {param.get("name"): param for param in docs.iterfind("param")}

        return [
            TargetParameter(
                name=param.get("Name", ""),
                type=param.get("Type", ""),
                element=slots.get(param.get("Name")),
            )
            for param in self.element.iterfind("Parameters/Parameter")
        ]


def parse_selector(attribute_name: str, export_attributes: Iterable[str]) -> MemberSelector | None:
    """Parse an ECMA ``AttributeName`` value into a selector.

    Returns None when the attribute is not one of the export attributes.
    """
    m = _ATTRIBUTE_NAME.match(attribute_name.strip())
    if m is None or m.group("attribute") not in set(export_attributes):
        return None
    return MemberSelector(Accessor(m.group("accessor") or ""), m.group("export"))


class MemberIndex:
    """Mapping of MemberSelector to ECMA ``Member`` element for one type."""

    def __init__(self, members: dict[MemberSelector, etree._Element] | None = None):
        self._members = dict(members or {})

    @classmethod
    def from_document(
        cls,
        document: etree._ElementTree,
        export_attributes: Iterable[str] = DEFAULT_EXPORT_ATTRIBUTES,
    ) -> "MemberIndex":
        export_attributes = tuple(export_attributes)
        members: dict[MemberSelector, etree._Element] = {}
        for member in document.getroot().iterfind("Members/Member"):
            for name in member.iterfind("Attributes/Attribute/AttributeName"):
                selector = parse_selector(name.text or "", export_attributes)
                if selector is not None:
                    # First declaration wins, as with a document-order lookup.
                    members.setdefault(selector, member)
        return cls(members)

    def __len__(self) -> int:
        return len(self._members)

    def get(self, selector: MemberSelector) -> etree._Element | None:
        return self._members.get(selector)


class MemberMatcher:
    """Resolve Doxygen members of one type to ECMA member slots."""

    def __init__(self, type_name: str, index: MemberIndex):
        self.type_name = type_name
        self.index = index

    @classmethod
    def for_document(
        cls,
        type_name: str,
        document: etree._ElementTree,
        export_attributes: Iterable[str] = DEFAULT_EXPORT_ATTRIBUTES,
    ) -> "MemberMatcher":
        return cls(type_name, MemberIndex.from_document(document, export_attributes))

    def match(self, kind: MemberKind | str, export_name: str) -> MemberMatch | None:
        """Find the ECMA member for a Doxygen member.

        Args:
            kind: Doxygen member kind (``property`` or ``function``)
            export_name: Native selector name from Doxygen's ``<name>``

        Returns:
            MemberMatch, or None after logging a ``member_unmatched`` warning
        """
        for accessor in LOOKUP_STRATEGIES[MemberKind(kind)]:
            selector = MemberSelector(accessor, export_name)
            element = self.index.get(selector)
            if element is not None:
                return MemberMatch(selector, element)

        logger.warning("member_unmatched", export=export_name, type=self.type_name)
        return None
