from __future__ import annotations

from typing import List

import pytest

from closuredeps.core.extractor import DependencyExtractor
from closuredeps.models import ExtractionResult, NodeKind, SyntaxNode


def _call(dotted: str, *args: SyntaxNode) -> SyntaxNode:
    return SyntaxNode.call(SyntaxNode.from_dotted(dotted), *args)


def _script(*statements: SyntaxNode) -> SyntaxNode:
    return SyntaxNode(NodeKind.SCRIPT, children=list(statements))


def _s(value: str) -> SyntaxNode:
    return SyntaxNode.string(value)


@pytest.fixture
def extractor() -> DependencyExtractor:
    return DependencyExtractor()


@pytest.mark.unit
class TestVisit:
    """Tests for DependencyExtractor.visit on single nodes."""

    def test_provide_adds_to_provides(self, extractor: DependencyExtractor) -> None:
        extractor.visit(_call("goog.provide", _s("my.module.Foo")))

        assert extractor.provides == {"my.module.Foo"}
        assert extractor.requires == set()

    def test_require_adds_to_requires(self, extractor: DependencyExtractor) -> None:
        extractor.visit(_call("goog.require", _s("my.module.Bar")))

        assert extractor.requires == {"my.module.Bar"}
        assert extractor.provides == set()

    def test_duplicate_provide_collapses(self, extractor: DependencyExtractor) -> None:
        node = _call("goog.provide", _s("a"))

        extractor.visit(node)
        extractor.visit(node)

        assert extractor.provides == {"a"}
        assert len(extractor.provides) == 1

    @pytest.mark.parametrize(
        "kind",
        [k for k in NodeKind if k is not NodeKind.CALL],
        ids=lambda k: k.value,
    )
    def test_non_call_kinds_are_noops(
        self, extractor: DependencyExtractor, kind: NodeKind
    ) -> None:
        """Non-call nodes shaped like a provide call are still ignored."""
        node = SyntaxNode(kind, children=[SyntaxNode.from_dotted("goog.provide"), _s("x")])

        extractor.visit(node)

        assert extractor.result().is_empty()

    def test_call_without_children_is_skipped(self, extractor: DependencyExtractor) -> None:
        extractor.visit(SyntaxNode(NodeKind.CALL))

        assert extractor.result().is_empty()

    def test_call_without_arguments_is_skipped(
        self, extractor: DependencyExtractor
    ) -> None:
        extractor.visit(_call("goog.provide"))
        extractor.visit(_call("goog.require"))

        assert extractor.result().is_empty()

    @pytest.mark.parametrize(
        "argument",
        [
            SyntaxNode.name_node("ns"),
            SyntaxNode(NodeKind.NUMBER),
            SyntaxNode(NodeKind.TEMPLATE),
            SyntaxNode.from_dotted("a.b.c"),
            SyntaxNode(NodeKind.STRING),  # string node without a value
        ],
        ids=["name", "number", "template", "getprop", "valueless-string"],
    )
    def test_non_string_first_argument_is_skipped(
        self, extractor: DependencyExtractor, argument: SyntaxNode
    ) -> None:
        extractor.visit(_call("goog.provide", argument))
        extractor.visit(_call("goog.require", argument))

        assert extractor.result().is_empty()

    def test_only_first_argument_is_used(self, extractor: DependencyExtractor) -> None:
        extractor.visit(_call("goog.require", _s("first"), _s("second")))

        assert extractor.requires == {"first"}

    def test_string_in_second_position_is_ignored(
        self, extractor: DependencyExtractor
    ) -> None:
        extractor.visit(_call("goog.require", SyntaxNode.name_node("x"), _s("second")))

        assert extractor.result().is_empty()

    @pytest.mark.parametrize(
        "dotted",
        [
            "foo.bar",
            "console.log",
            "goog.module",
            "goog.requireType",
            "goog.provide.call",
            "my.goog.provide",
            "provide",
        ],
    )
    def test_unrelated_callees_are_ignored(
        self, extractor: DependencyExtractor, dotted: str
    ) -> None:
        extractor.visit(_call(dotted, _s("x")))

        assert extractor.result().is_empty()

    def test_computed_callee_is_ignored(self, extractor: DependencyExtractor) -> None:
        """goog['provide']('x') has no qualified name."""
        callee = SyntaxNode(
            NodeKind.GETELEM,
            children=[SyntaxNode.name_node("goog"), _s("provide")],
        )

        extractor.visit(SyntaxNode.call(callee, _s("x")))

        assert extractor.result().is_empty()

    def test_call_result_callee_is_ignored(self, extractor: DependencyExtractor) -> None:
        """getGoog().provide('x') is not rooted at a name."""
        callee = SyntaxNode.getprop(_call("getGoog"), "provide")

        extractor.visit(SyntaxNode.call(callee, _s("x")))

        assert extractor.result().is_empty()

    def test_empty_string_namespace_is_recorded(
        self, extractor: DependencyExtractor
    ) -> None:
        extractor.visit(_call("goog.provide", _s("")))

        assert extractor.provides == {""}

    def test_visit_never_raises_on_odd_shapes(
        self, extractor: DependencyExtractor
    ) -> None:
        odd_nodes: List[SyntaxNode] = [
            SyntaxNode(NodeKind.CALL, children=[SyntaxNode(NodeKind.GETPROP)]),
            SyntaxNode(NodeKind.CALL, children=[SyntaxNode(NodeKind.NAME)]),
            SyntaxNode(NodeKind.CALL, children=[SyntaxNode(NodeKind.OTHER), _s("x")]),
            SyntaxNode(NodeKind.OTHER),
        ]

        for node in odd_nodes:
            extractor.visit(node)

        assert extractor.result().is_empty()


@pytest.mark.unit
class TestExtract:
    """Tests for DependencyExtractor.extract over whole trees."""

    def test_end_to_end_example(self, extractor: DependencyExtractor) -> None:
        root = _script(
            _call("goog.provide", _s("my.module.Foo")),
            _call("goog.require", _s("my.module.Bar")),
            _call("console.log", _s("hi")),
        )

        result = extractor.extract(root)

        assert result == ExtractionResult(
            provides=frozenset({"my.module.Foo"}),
            requires=frozenset({"my.module.Bar"}),
        )

    def test_tree_without_calls_yields_empty_sets(
        self, extractor: DependencyExtractor
    ) -> None:
        root = _script(
            SyntaxNode(NodeKind.OTHER, children=[SyntaxNode.name_node("x"), _s("y")]),
        )

        result = extractor.extract(root)

        assert result.provides == frozenset()
        assert result.requires == frozenset()

    def test_nested_calls_are_found(self, extractor: DependencyExtractor) -> None:
        """A require used as an argument of another call is still recognized."""
        inner = _call("goog.require", _s("goog.dom"))
        outer = _call("wrap", inner)
        root = _script(SyntaxNode(NodeKind.OTHER, children=[outer]))

        result = extractor.extract(root)

        assert result.requires == frozenset({"goog.dom"})

    def test_call_as_callee_of_another_call(self, extractor: DependencyExtractor) -> None:
        """goog.require('a')('b') records 'a' only."""
        inner = _call("goog.require", _s("a"))
        root = _script(SyntaxNode.call(inner, _s("b")))

        result = extractor.extract(root)

        assert result.requires == frozenset({"a"})

    def test_many_declarations(self, extractor: DependencyExtractor) -> None:
        root = _script(
            _call("goog.provide", _s("app.A")),
            _call("goog.provide", _s("app.B")),
            _call("goog.require", _s("goog.array")),
            _call("goog.require", _s("goog.array")),
            _call("goog.require", _s("goog.dom")),
        )

        result = extractor.extract(root)

        assert result.provides == frozenset({"app.A", "app.B"})
        assert result.requires == frozenset({"goog.array", "goog.dom"})

    def test_extract_resets_previous_state(self, extractor: DependencyExtractor) -> None:
        first = extractor.extract(_script(_call("goog.provide", _s("one"))))
        second = extractor.extract(_script(_call("goog.provide", _s("two"))))

        assert first.provides == frozenset({"one"})
        assert second.provides == frozenset({"two"})

    def test_result_is_a_snapshot(self, extractor: DependencyExtractor) -> None:
        extractor.visit(_call("goog.provide", _s("a")))
        snapshot = extractor.result()

        extractor.visit(_call("goog.provide", _s("b")))

        assert snapshot.provides == frozenset({"a"})
        assert extractor.result().provides == frozenset({"a", "b"})

    def test_deep_tree_does_not_recurse(self, extractor: DependencyExtractor) -> None:
        node = _call("goog.require", _s("deep"))
        for _ in range(5000):
            node = SyntaxNode(NodeKind.OTHER, children=[node])

        result = extractor.extract(_script(node))

        assert result.requires == frozenset({"deep"})

    def test_separate_instances_do_not_share_state(self) -> None:
        first = DependencyExtractor()
        second = DependencyExtractor()

        first.visit(_call("goog.provide", _s("a")))

        assert second.result().is_empty()


@pytest.mark.unit
class TestReset:
    """Tests for DependencyExtractor.reset."""

    def test_reset_clears_sets(self, extractor: DependencyExtractor) -> None:
        extractor.visit(_call("goog.provide", _s("a")))
        extractor.visit(_call("goog.require", _s("b")))

        extractor.reset()

        assert extractor.result().is_empty()

    def test_visit_after_reset_still_records(
        self, extractor: DependencyExtractor
    ) -> None:
        extractor.visit(_call("goog.provide", _s("a")))
        extractor.reset()

        extractor.visit(_call("goog.provide", _s("b")))

        assert extractor.provides == {"b"}
