"""
Positional parameter alignment.

Doxygen parameter names come from the Objective-C header while ECMA parameter
names come from the managed binding, so the two rarely agree. Descriptions
are therefore bound by position: the Nth ``@param`` fills the Nth declared
parameter.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from doc_merge.logging import get_logger
from doc_merge.markup import MarkupTransformer, ParameterDescription
from doc_merge.members import TargetParameter

logger = get_logger(__name__)

DEFAULT_BOOLEAN_TYPES = ("System.Boolean", "bool")


class ParameterAligner:
    """Write parameter descriptions into ECMA ``param`` slots.

    Boolean-typed parameters get their descriptions rewritten with boolean
    literal substitution, so ``YES to enable`` becomes ``true to enable``.
    """

    def __init__(
        self,
        transformer: MarkupTransformer,
        boolean_types: Iterable[str] = DEFAULT_BOOLEAN_TYPES,
    ):
        self.transformer = transformer
        self.boolean_types = frozenset(boolean_types)

    def is_boolean(self, parameter: TargetParameter) -> bool:
        return parameter.type in self.boolean_types

    def align(
        self,
        descriptions: Sequence[ParameterDescription],
        slots: Sequence[TargetParameter],
        member: str = "",
        trace: bool = False,
    ) -> int:
        """Bind descriptions to slots by position.

        Pairing stops at the shorter sequence; a count mismatch is logged
        but never raised. A member with no parameter docs at all is not
        a mismatch.

        Returns:
            Number of slots written
        """
        if descriptions and len(descriptions) != len(slots):
            logger.warning(
                "parameter_count_mismatch",
                member=member,
                descriptions=len(descriptions),
                slots=len(slots),
            )

        bound = 0
        for description, slot in zip(descriptions, slots):
            if slot.element is None:
                logger.debug("parameter_slot_missing", member=member, parameter=slot.name)
                continue

            result = self.transformer.transform(
                description.description,
                booleans=self.is_boolean(slot),
                trace=trace,
            )

            for child in list(slot.element):
                slot.element.remove(child)
            slot.element.text = result.text.strip()
            bound += 1

        return bound
