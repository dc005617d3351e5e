"""Tests for the Differencer.

Covers:
- No-op diff of identical trees emits nothing
- Text add / replace / remove (trimmed comparison)
- Attribute add / replace / remove, declaration-order independence
- Ordered mode: merge-join in document order, inserts before the next
  unconsumed source sibling
- Unordered mode: key matching regardless of position, appended inserts
- The version / text / remove scenario with its exact addresses
- Payloads are independent clones; the caller's trees are never mutated
- StructureMismatchError on differing roots
- diff_subtrees
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from xml_patch.algorithm import DiffConfig, Differencer, ElementOrdering
from xml_patch.errors import MalformedSelectorError, StructureMismatchError
from xml_patch.events import Add, Difference, Position, Remove, Replace
from xml_patch.sinks import PatchCollector
from xml_patch.tree.nodes import Attribute, Element, Text

XmlFactory = Callable[[str], Element]

UNORDERED = DiffConfig(ordering=ElementOrdering.UNORDERED)


def run_diff(
    source: Element, target: Element, config: DiffConfig | None = None
) -> PatchCollector:
    sink = PatchCollector()
    Differencer(config).diff(source, target, sink)
    return sink


# ---------------------------------------------------------------------------
# No-op
# ---------------------------------------------------------------------------


class TestNoOp:
    @pytest.mark.parametrize(
        "document",
        [
            "<r/>",
            '<r version="1"><c>old</c><d/></r>',
            '<r><c id="1"><v>x</v></c><c id="2"/><c/><c/></r>',
            "<r>head<a/>tail</r>",
        ],
    )
    @pytest.mark.parametrize("config", [DiffConfig(), UNORDERED])
    def test_identical_trees(
        self, xml: XmlFactory, document: str, config: DiffConfig
    ) -> None:
        assert len(run_diff(xml(document), xml(document), config)) == 0

    def test_same_tree_object(self, xml: XmlFactory) -> None:
        tree = xml('<r a="1"><c/></r>')
        assert len(run_diff(tree, tree)) == 0

    def test_default_config(self) -> None:
        assert Differencer().config == DiffConfig()


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


class TestText:
    def test_replace(self, xml: XmlFactory) -> None:
        (event,) = run_diff(xml("<r><c>old</c></r>"), xml("<r><c>new</c></r>"))
        assert event == Replace("/r/c", Text("new"), Text("old"))

    def test_surrounding_whitespace_is_ignored(self, xml: XmlFactory) -> None:
        assert len(run_diff(xml("<r><c> v </c></r>"), xml("<r><c>v</c></r>"))) == 0

    def test_add(self, xml: XmlFactory) -> None:
        (event,) = run_diff(xml("<r><c/></r>"), xml("<r><c>t</c></r>"))
        assert event == Add("/r/c", Text("t"))

    def test_remove_targets_text_node(self, xml: XmlFactory) -> None:
        (event,) = run_diff(xml("<r><c>t</c></r>"), xml("<r><c/></r>"))
        assert event == Remove("/r/c/text()")


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


class TestAttributes:
    def test_declaration_order_is_irrelevant(self, xml: XmlFactory) -> None:
        source = xml('<r a="1" b="2" c="3"/>')
        target = xml('<r c="3" a="1" b="2"/>')
        assert len(run_diff(source, target)) == 0

    def test_add_replace_remove(self, xml: XmlFactory) -> None:
        events = list(run_diff(xml('<r a="1" b="2"/>'), xml('<r b="3" c="4"/>')))
        assert events == [
            Remove("/r/@a"),
            Replace("/r/@b", Attribute("b", "3"), Attribute("b", "2")),
            Add("/r", Attribute("c", "4")),
        ]

    def test_keyed_element_address(self, xml: XmlFactory) -> None:
        (event,) = run_diff(
            xml('<r><c id="x" v="1"/></r>'), xml('<r><c id="x" v="2"/></r>')
        )
        assert event.address == "/r/c[@id='x']/@v"

    def test_key_change_replaces_element(self, xml: XmlFactory) -> None:
        sink = run_diff(xml('<r><c id="x"/></r>'), xml('<r><c id="y"/></r>'))
        assert [(e.difference, e.address) for e in sink] == [
            (Difference.REMOVE, "/r/c[@id='x']"),
            (Difference.ADD, "/r"),
        ]


# ---------------------------------------------------------------------------
# Concrete scenario
# ---------------------------------------------------------------------------


def test_version_text_and_remove(xml: XmlFactory) -> None:
    source = xml('<r version="1"><c>old</c><d/></r>')
    target = xml('<r version="2"><c>new</c></r>')
    assert list(run_diff(source, target)) == [
        Replace("/r/@version", Attribute("version", "2"), Attribute("version", "1")),
        Replace("/r/c", Text("new"), Text("old")),
        Remove("/r/d"),
    ]


# ---------------------------------------------------------------------------
# Ordered children
# ---------------------------------------------------------------------------


class TestOrdered:
    def test_reorder_is_one_remove_and_one_add(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><a/><b/></r>"), xml("<r><b/><a/></r>"))
        assert list(sink) == [Remove("/r/a"), Add("/r", Element("a"))]

    def test_trailing_add_appends(self, xml: XmlFactory) -> None:
        (event,) = run_diff(xml("<r><a/></r>"), xml("<r><a/><b/></r>"))
        assert event == Add("/r", Element("b"))

    def test_insert_in_middle(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><a/><c/></r>"), xml("<r><a/><b/><c/></r>"))
        assert list(sink) == [Add("/r/c", Element("b"), Position.BEFORE)]

    def test_consecutive_inserts_share_the_next_source_sibling(
        self, xml: XmlFactory
    ) -> None:
        sink = run_diff(xml("<r><a/><d/></r>"), xml("<r><a/><b/><c/><d/></r>"))
        assert list(sink) == [
            Add("/r/d", Element("b"), Position.BEFORE),
            Add("/r/d", Element("c"), Position.BEFORE),
        ]

    def test_inserts_before_each_remaining_sibling(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><b/><d/></r>"), xml("<r><a/><b/><c/><d/></r>"))
        assert list(sink) == [
            Add("/r/b", Element("a"), Position.BEFORE),
            Add("/r/d", Element("c"), Position.BEFORE),
        ]

    def test_remove_then_insert(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><a/><c/><e/></r>"), xml("<r><a/><d/><e/></r>"))
        assert list(sink) == [
            Remove("/r/c"),
            Add("/r/e", Element("d"), Position.BEFORE),
        ]

    def test_delete_in_middle(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><a/><b/><c/><d/></r>"), xml("<r><a/><c/><d/></r>"))
        assert list(sink) == [Remove("/r/b")]

    def test_keyed_delete(self, xml: XmlFactory) -> None:
        sink = run_diff(
            xml('<r><x id="1"/><x id="2"/><x id="3"/></r>'),
            xml('<r><x id="1"/><x id="3"/></r>'),
        )
        assert list(sink) == [Remove("/r/x[@id='2']")]

    def test_out_of_order_names_fall_back_to_remove_and_append(
        self, xml: XmlFactory
    ) -> None:
        # the join assumes document order agrees with key order
        sink = run_diff(xml("<r><a/><b/></r>"), xml("<r><x/><b/></r>"))
        assert list(sink) == [
            Remove("/r/a"),
            Remove("/r/b"),
            Add("/r", Element("x")),
            Add("/r", Element("b")),
        ]

    def test_trailing_remove(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><a/><b/><c/></r>"), xml("<r><a/></r>"))
        assert sink.addresses(Difference.REMOVE) == ["/r/b", "/r/c"]

    def test_positional_siblings(self, xml: XmlFactory) -> None:
        sink = run_diff(
            xml("<r><v>1</v><v>2</v></r>"), xml("<r><v>1</v><v>3</v></r>")
        )
        assert sink.addresses() == ["/r/v[2]"]

    def test_recurses_into_matched_children(self, xml: XmlFactory) -> None:
        sink = run_diff(
            xml('<r><s id="1"><v k="a"/></s></r>'),
            xml('<r><s id="1"><v k="b"/></s></r>'),
        )
        assert sink.addresses() == ["/r/s[@id='1']/v/@k"]


# ---------------------------------------------------------------------------
# Unordered children
# ---------------------------------------------------------------------------


class TestUnordered:
    def test_reorder_is_no_change(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><a/><b/></r>"), xml("<r><b/><a/></r>"), UNORDERED)
        assert len(sink) == 0

    def test_matches_by_id(self, xml: XmlFactory) -> None:
        sink = run_diff(
            xml('<r><i id="2"/><i id="1"/></r>'),
            xml('<r><i id="1"/><i id="2" v="x"/></r>'),
            UNORDERED,
        )
        assert list(sink) == [Add("/r/i[@id='2']", Attribute("v", "x"))]

    def test_adds_append(self, xml: XmlFactory) -> None:
        sink = run_diff(xml("<r><b/></r>"), xml("<r><a/><b/></r>"), UNORDERED)
        assert list(sink) == [Add("/r", Element("a"))]

    def test_removes(self, xml: XmlFactory) -> None:
        sink = run_diff(
            xml('<r><i id="1"/><i id="2"/><i id="3"/></r>'),
            xml('<r><i id="3"/><i id="1"/></r>'),
            UNORDERED,
        )
        assert list(sink) == [Remove("/r/i[@id='2']")]

    def test_mixed_keyed_and_unkeyed_siblings_churn_attributes(
        self, xml: XmlFactory
    ) -> None:
        sink = run_diff(
            xml('<r><x id="1"/><x name="n"/></r>'),
            xml('<r><x name="n"/><x id="1"/></r>'),
            UNORDERED,
        )
        assert [e.difference for e in sink] == [
            Difference.REMOVE,
            Difference.ADD,
            Difference.ADD,
            Difference.REMOVE,
        ]
        assert all(
            isinstance(e.value, Attribute) if isinstance(e, Add) else "/@" in e.address
            for e in sink
        )


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


class TestIsolation:
    def test_inputs_are_not_mutated(self, xml: XmlFactory) -> None:
        source = xml('<r v="1"><a>t</a><b/></r>')
        target = xml('<r v="2"><b>u</b><c/></r>')
        source_copy, target_copy = source.clone(), target.clone()
        run_diff(source, target)
        assert source == source_copy
        assert target == target_copy

    def test_payloads_are_detached_clones(self, xml: XmlFactory) -> None:
        target = xml("<r><a><deep/></a></r>")
        (event,) = run_diff(xml("<r/>"), target)
        assert isinstance(event, Add)
        payload = event.value
        assert isinstance(payload, Element)
        assert payload.parent is None
        assert payload is not target.element_children()[0]
        assert payload == target.element_children()[0]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestStructureMismatch:
    def test_different_roots(self, xml: XmlFactory) -> None:
        sink = PatchCollector()
        with pytest.raises(
            StructureMismatchError, match="not comparing same root nodes"
        ) as excinfo:
            Differencer().diff(xml("<a/>"), xml("<b/>"), sink)
        assert excinfo.value.source_path == "/a"
        assert excinfo.value.target_path == "/b"
        assert len(sink) == 0


# ---------------------------------------------------------------------------
# Subtrees
# ---------------------------------------------------------------------------


class TestDiffSubtrees:
    def test_addresses_are_absolute_in_source(self, xml: XmlFactory) -> None:
        sink = PatchCollector()
        Differencer().diff_subtrees(
            xml("<r><s><a>1</a></s><t/></r>"),
            "/r/s",
            xml("<doc><s><a>2</a></s></doc>"),
            "/doc/s",
            sink,
        )
        assert list(sink) == [Replace("/r/s/a", Text("2"), Text("1"))]

    def test_non_element_selection(self, xml: XmlFactory) -> None:
        with pytest.raises(ValueError, match="not both Elements"):
            Differencer().diff_subtrees(
                xml('<r x="1"/>'), "/r/@x", xml("<r/>"), "/r", PatchCollector()
            )

    def test_missing_selection(self, xml: XmlFactory) -> None:
        with pytest.raises(ValueError, match="not both Elements"):
            Differencer().diff_subtrees(
                xml("<r/>"), "/r", xml("<r/>"), "/r/missing", PatchCollector()
            )

    def test_malformed_selector(self, xml: XmlFactory) -> None:
        with pytest.raises(MalformedSelectorError):
            Differencer().diff_subtrees(
                xml("<r/>"), "/r[", xml("<r/>"), "/r", PatchCollector()
            )

    def test_name_mismatch(self, xml: XmlFactory) -> None:
        with pytest.raises(StructureMismatchError):
            Differencer().diff_subtrees(
                xml("<r><a/></r>"), "/r/a", xml("<r><b/></r>"), "/r/b", PatchCollector()
            )
