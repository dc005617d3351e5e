"""pytest plugin exposing the ``assert_xml_equivalent`` fixture.

Registered through the ``pytest11`` entry point in pyproject.toml, so any
project with xml-patch installed can request the fixture without touching
its conftest.py.
"""

from __future__ import annotations

from typing import Any

import pytest

from xml_patch import PatchCollector, diff
from xml_patch.tree import Element, TreeBuilder


def _as_tree(document: Element | str | bytes) -> Element:
    if isinstance(document, Element):
        return document
    return TreeBuilder().from_string(document)


@pytest.fixture(scope="session")
def assert_xml_equivalent() -> Any:
    """Fixture that returns a callable XML equivalence asserter.

    Session scope is safe: each call builds its own trees and Differencer.

    Usage in tests::

        def test_render(assert_xml_equivalent):
            assert_xml_equivalent("<r><a/><b/></r>", "<r><b/><a/></r>", ordered=False)

        def test_changed(assert_xml_equivalent):
            with pytest.raises(AssertionError, match=r"differences="):
                assert_xml_equivalent('<r v="1"/>', '<r v="2"/>')

    Returns:
        A callable ``_assert(actual, expected, ordered=True) -> None`` that
        raises ``AssertionError`` when diffing the documents emits any event.
    """

    def _assert(
        actual: Element | str | bytes,
        expected: Element | str | bytes,
        ordered: bool = True,
    ) -> None:
        """Assert that two XML documents have no structural differences.

        Args:
            actual:   The document produced by the code under test (an
                      Element or XML text).
            expected: The expected document.
            ordered:  Whether sibling order is significant.

        Raises:
            AssertionError: When any add, replace or remove is needed to turn
                ``actual`` into ``expected``; the message lists each one.
        """
        sink = PatchCollector()
        diff(_as_tree(actual), _as_tree(expected), sink, ordered=ordered)
        if len(sink):
            lines = "\n".join(
                f"  {event.difference} {event.address}" for event in sink
            )
            raise AssertionError(
                f"XML documents not equivalent: differences={len(sink)}\n{lines}"
            )

    return _assert
