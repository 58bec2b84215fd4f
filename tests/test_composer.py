"""
tests/test_composer.py — pytest unit tests for pipeline.composer.

Ordering is checked with marker decorators that append a tag to the
result: the innermost wrapper appends first, so the tag string reads in
reverse registration order.
"""

from __future__ import annotations

from typing import Callable

import pytest

from core.errors import CompositionError
from pipeline.composer import BiComposer, Composer, bicompose, compose


# ──────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────

def _tag(name: str) -> Callable:
    """Unary factory whose wrapper appends *name* to the wrapped result."""
    def factory(f: Callable[[str], str]) -> Callable[[str], str]:
        def tagged(arg: str) -> str:
            return f(arg) + name
        return tagged
    factory.__name__ = f"tag_{name}"
    return factory


def _bitag(name: str) -> Callable:
    """Binary factory whose wrapper appends *name* to the wrapped result."""
    def factory(f: Callable[[str, str], str]) -> Callable[[str, str], str]:
        def tagged(a: str, b: str) -> str:
            return f(a, b) + name
        return tagged
    return factory


def _identity(s: str) -> str:
    return s


# ──────────────────────────────────────────────────────────────
# Test 1 — Ordering
# ──────────────────────────────────────────────────────────────

class TestOrdering:
    """First listed factory is the outermost wrapper."""

    def test_three_markers_apply_in_reverse_registration_order(self) -> None:
        pipeline = Composer([_tag("A"), _tag("B"), _tag("C")]).create_pipeline(_identity)
        assert pipeline(">") == ">CBA"

    def test_equivalent_to_manual_nesting(self) -> None:
        a, b, c = _tag("A"), _tag("B"), _tag("C")
        manual = a(b(c(_identity)))
        composed = compose([a, b, c], _identity)
        assert composed("x") == manual("x")

    def test_binary_markers(self) -> None:
        pipeline = BiComposer([_bitag("1"), _bitag("2")]).create_pipeline(lambda a, b: a + b)
        assert pipeline("p", "q") == "pq21"

    def test_bicompose_helper(self) -> None:
        assert bicompose([_bitag("Z")], lambda a, b: a * b)("ab", 2) == "ababZ"

    def test_factories_reported_in_registration_order(self) -> None:
        a, b = _tag("A"), _tag("B")
        composer = Composer([a, b])
        assert composer.factories == (a, b)
        assert len(composer) == 2


# ──────────────────────────────────────────────────────────────
# Test 2 — Construction
# ──────────────────────────────────────────────────────────────

class TestConstruction:

    def test_caller_list_not_mutated(self) -> None:
        a, b, c = _tag("A"), _tag("B"), _tag("C")
        factories = [a, b, c]
        Composer(factories)
        assert factories == [a, b, c]

    def test_empty_list_returns_source(self) -> None:
        assert Composer([]).create_pipeline(_identity) is _identity
        assert BiComposer().create_pipeline(max) is max

    def test_composer_is_reusable(self) -> None:
        """Two builds are semantically equal but distinct objects."""
        composer = Composer([_tag("A"), _tag("B")])
        first = composer.create_pipeline(_identity)
        second = composer.create_pipeline(_identity)
        assert first is not second
        assert first("-") == second("-") == "-BA"

    def test_non_callable_factory_rejected(self) -> None:
        with pytest.raises(CompositionError) as exc_info:
            Composer([_tag("A"), "not a factory"])
        err = exc_info.value
        assert err.position == 1
        assert err.obj == "not a factory"
        assert isinstance(err, TypeError)

    def test_non_callable_source_rejected(self) -> None:
        with pytest.raises(CompositionError) as exc_info:
            Composer([_tag("A")]).create_pipeline(42)
        assert exc_info.value.position is None

    def test_repr_lists_factory_names(self) -> None:
        assert repr(Composer([_tag("A")])) == "Composer(['tag_A'])"


# ──────────────────────────────────────────────────────────────
# Test 3 — Failure propagation
# ──────────────────────────────────────────────────────────────

class TestFailurePropagation:

    def test_source_exception_reaches_caller_unchanged(self) -> None:
        boom = ValueError("bad input")

        def failing(_: str) -> str:
            raise boom

        pipeline = compose([_tag("A"), _tag("B")], failing)
        with pytest.raises(ValueError) as exc_info:
            pipeline("x")
        assert exc_info.value is boom

    def test_decorator_exception_reaches_caller(self) -> None:
        def exploding(f: Callable) -> Callable:
            def wrapper(arg: str) -> str:
                raise KeyError(arg)
            return wrapper

        pipeline = compose([_tag("A"), exploding], _identity)
        with pytest.raises(KeyError):
            pipeline("k")
