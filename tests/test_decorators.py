"""
tests/test_decorators.py — Unit tests for pipeline.decorators.

Covers the log / bilog observability wrappers and the memoize / bimemoize
caches, including the separator-free binary key.
"""

from __future__ import annotations

import math
import threading
import unittest
from unittest.mock import MagicMock, patch

import pytest

from pipeline import BiComposer, Composer, bilog, bimemoize, log, memoize


class _Counter:
    """Callable recording how often it ran and with what."""

    def __init__(self, fn) -> None:
        self.fn = fn
        self.calls: list[tuple] = []
        self.__name__ = getattr(fn, "__name__", "counter")

    def __call__(self, *args):
        self.calls.append(args)
        return self.fn(*args)


# ──────────────────────────────────────────────────────────────
# Logger
# ──────────────────────────────────────────────────────────────

class TestLog(unittest.TestCase):
    """log / bilog record arguments and never alter the result."""

    def test_unary_records_argument(self) -> None:
        with patch("pipeline.decorators._log") as mock_log:
            result = log(math.sqrt)(16)
        self.assertEqual(result, 4.0)
        mock_log.info.assert_called_once()
        phase, event, data = mock_log.info.call_args.args
        self.assertEqual((phase, event), ("pipeline", "computing"))
        self.assertEqual(data["message"], "Computing for argument(s): 16")
        self.assertEqual(data["function"], "sqrt")

    def test_binary_records_both_arguments(self) -> None:
        with patch("pipeline.decorators._log") as mock_log:
            result = bilog(lambda x, y: x + y)(16, 10)
        self.assertEqual(result, 26)
        data = mock_log.info.call_args.args[2]
        self.assertEqual(data["message"], "Computing for argument(s): 16,10")

    def test_failure_propagates(self) -> None:
        def failing(_):
            raise RuntimeError("nope")

        with self.assertRaises(RuntimeError):
            log(failing)("x")

    def test_preserves_wrapped_name(self) -> None:
        def create_email(name: str) -> str:
            return name

        self.assertEqual(log(create_email).__name__, "create_email")


# ──────────────────────────────────────────────────────────────
# Memoizer
# ──────────────────────────────────────────────────────────────

class TestMemoize:
    """memoize computes each key at most once and owns a private cache."""

    def test_second_call_served_from_cache(self) -> None:
        source = _Counter(lambda s: s.upper())
        cached = memoize(source)
        assert cached("echo") == "ECHO"
        assert cached("echo") == "ECHO"
        assert len(source.calls) == 1
        assert cached.cache_size() == 1
        assert cached.cache_keys() == ("echo",)

    def test_distinct_arguments_computed_separately(self) -> None:
        source = _Counter(math.sqrt)
        cached = memoize(source)
        assert cached(16) == 4.0
        assert cached(9) == 3.0
        assert len(source.calls) == 2

    def test_key_is_string_form(self) -> None:
        """``16`` and ``"16"`` share the key ``"16"``."""
        source = _Counter(lambda v: type(v).__name__)
        cached = memoize(source)
        assert cached(16) == "int"
        assert cached("16") == "int"
        assert len(source.calls) == 1

    def test_failure_not_cached(self) -> None:
        attempts: list[int] = []

        def flaky(x: int) -> int:
            attempts.append(x)
            if len(attempts) == 1:
                raise ConnectionError("transient")
            return x * 2

        cached = memoize(flaky)
        with pytest.raises(ConnectionError):
            cached(5)
        assert cached.cache_size() == 0
        assert cached(5) == 10
        assert cached(5) == 10
        assert attempts == [5, 5]

    def test_nested_memoizers_keep_separate_caches(self) -> None:
        source = _Counter(lambda x: x + 1)
        inner = memoize(source)
        outer = memoize(inner)
        assert outer(1) == 2
        assert outer(1) == 2
        assert inner(2) == 3
        assert len(source.calls) == 2
        assert outer.cache_keys() == ("1",)
        assert inner.cache_keys() == ("1", "2")

    def test_composed_memoize_log_logs_once(self) -> None:
        source = _Counter(math.sqrt)
        with patch("pipeline.decorators._log") as mock_log:
            sqrt = Composer([memoize, log]).create_pipeline(source)
            sqrt(16)
            sqrt(16)
        assert mock_log.info.call_count == 1
        assert len(source.calls) == 1

    def test_recursive_memoized_function_does_not_deadlock(self) -> None:
        """The cache lock is not held while the wrapped function runs."""
        def fib(n: int) -> int:
            return n if n < 2 else fast_fib(n - 1) + fast_fib(n - 2)

        fast_fib = memoize(fib)
        assert fast_fib(60) == 1548008755920

    def test_concurrent_callers_agree(self) -> None:
        cached = memoize(lambda x: object())
        barrier = threading.Barrier(8)
        seen: list[object] = []
        lock = threading.Lock()

        def _call() -> None:
            barrier.wait()
            value = cached("same")
            with lock:
                seen.append(value)

        threads = [threading.Thread(target=_call) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=2.0)

        assert len(seen) == 8
        assert all(v is seen[0] for v in seen)
        assert cached.cache_size() == 1


class TestBimemoize:
    """Binary keys are ``str(a) + str(b)`` with no separator."""

    def test_second_call_served_from_cache(self) -> None:
        source = _Counter(lambda x, y: x + y)
        add = bimemoize(source)
        assert add(16, 10) == 26
        assert add(16, 10) == 26
        assert len(source.calls) == 1

    def test_concatenated_key_collides(self) -> None:
        """(1, 23) and (12, 3) both produce key "123": the second call returns the first result."""
        source = _Counter(lambda x, y: x + y)
        add = bimemoize(source)
        assert add(1, 23) == 24
        assert add(12, 3) == 24
        assert source.calls == [(1, 23)]
        assert add.cache_keys() == ("123",)

    def test_argument_order_matters(self) -> None:
        source = _Counter(lambda x, y: x - y)
        sub = bimemoize(source)
        assert sub(5, 3) == 2
        assert sub(3, 5) == -2
        assert len(source.calls) == 2

    def test_bicomposer_pipeline(self) -> None:
        source = _Counter(lambda x, y: x * y)
        with patch("pipeline.decorators._log"):
            mul = BiComposer([bimemoize, bilog]).create_pipeline(source)
            assert mul(6, 7) == 42
            assert mul(6, 7) == 42
        assert len(source.calls) == 1


def test_mock_spy_through_memoize() -> None:
    """MagicMock sources work too: the cache stops repeat calls reaching them."""
    source = MagicMock(return_value="ok")
    cached = memoize(source)
    cached("a")
    cached("a")
    source.assert_called_once_with("a")
