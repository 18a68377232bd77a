"""Tests for the parameters module."""

import pytest
from lxml import etree
from structlog.testing import capture_logs

from doc_merge.markup import MarkupTransformer, ParameterDescription
from doc_merge.members import TargetParameter
from doc_merge.parameters import ParameterAligner


def description(name, text):
    return ParameterDescription(
        name=name,
        description=etree.fromstring(
            f"<parameterdescription><para>{text}</para></parameterdescription>"
        ),
    )


def slot(name, type_):
    return TargetParameter(name=name, type=type_, element=etree.Element("param", name=name))


@pytest.fixture
def aligner(memory_catalog):
    return ParameterAligner(MarkupTransformer(memory_catalog))


class TestParameterAligner:
    """Tests for ParameterAligner."""

    def test_boolean_parameter_gets_literals(self, aligner):
        target = slot("enabled", "System.Boolean")

        bound = aligner.align([description("enabled", "YES to enable, NO to disable")], [target])

        assert bound == 1
        assert target.element.text == "true to enable, false to disable"

    def test_boolean_literals_in_list_items(self, aligner):
        target = slot("visible", "System.Boolean")
        text = (
            "Values:<itemizedlist>"
            "<listitem><para>YES to show</para></listitem>"
            "<listitem><para>NO to hide</para></listitem>"
            "</itemizedlist>"
        )

        aligner.align([description("visible", text)], [target])

        assert target.element.text == "Values:true to showfalse to hide"

    def test_non_boolean_parameter_keeps_literals(self, aligner):
        target = slot("title", "System.String")

        aligner.align([description("title", "Shown when YES")], [target])

        assert target.element.text == "Shown when YES"

    def test_binding_is_positional(self, aligner):
        """Names are ignored; the Nth description fills the Nth slot."""
        slots = [slot("a", "System.Single"), slot("b", "System.Single")]

        aligner.align([description("y", "first"), description("x", "second")], slots)

        assert [s.element.text for s in slots] == ["first", "second"]

    def test_extra_descriptions_truncated_with_warning(self, aligner):
        target = slot("action", "Cocos2D.CCAction")

        with capture_logs() as logs:
            bound = aligner.align(
                [description("action", "The action."), description("target", "Ignored.")],
                [target],
                member="Widget.runAction:",
            )

        assert bound == 1
        assert target.element.text == "The action."
        mismatches = [log for log in logs if log["event"] == "parameter_count_mismatch"]
        assert mismatches == [{
            "event": "parameter_count_mismatch",
            "member": "Widget.runAction:",
            "descriptions": 2,
            "slots": 1,
            "log_level": "warning",
        }]

    def test_extra_slots_left_alone(self, aligner):
        first, second = slot("x", "System.Single"), slot("y", "System.Single")
        second.element.text = "To be added."

        with capture_logs():
            bound = aligner.align([description("x", "Horizontal.")], [first, second])

        assert bound == 1
        assert second.element.text == "To be added."

    def test_no_descriptions_is_silent(self, aligner):
        target = slot("x", "System.Single")

        with capture_logs() as logs:
            assert aligner.align([], [target]) == 0

        assert logs == []

    def test_slot_content_replaced(self, aligner):
        target = slot("node", "Cocos2D.CCNode")
        etree.SubElement(target.element, "see", cref="T:Old")

        aligner.align([description("node", "A <ref kindref='compound' refid='o'>NSObject</ref>.")], [target])

        assert len(target.element) == 0
        assert target.element.text == "A NSObject."

    def test_custom_boolean_types(self, memory_catalog):
        aligner = ParameterAligner(MarkupTransformer(memory_catalog), boolean_types=["BOOL"])
        target = slot("flag", "BOOL")

        aligner.align([description("flag", "YES")], [target])

        assert target.element.text == "true"
