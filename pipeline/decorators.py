"""
pipeline/decorators.py — Generic decorator factories for pipelines.

``log`` / ``bilog`` record the arguments of every call; ``memoize`` /
``bimemoize`` cache results by a string key built from the arguments.
Each factory preserves the wrapped function's signature, so they can be
listed in a :class:`~pipeline.composer.Composer` or applied directly::

    sqrt = memoize(log(math.sqrt))
    add = bimemoize(bilog(operator.add))

Memoization keys are ``str(arg)`` for unary functions and
``str(a) + str(b)`` for binary ones. The binary key has no separator, so
``(1, 23)`` and ``(12, 3)`` both map to ``"123"`` and share one cache slot.
"""

from __future__ import annotations

import functools
import threading
from typing import Any, Callable, TypeVar

from core.constants import C
from core.logger import get_logger

R = TypeVar("R")

_log = get_logger()


# ──────────────────────────────────────────────────────────────
# Logger
# ──────────────────────────────────────────────────────────────

def log(f: Callable[[Any], R]) -> Callable[[Any], R]:
    """Record ``Computing for argument(s): <arg>`` then call *f* unchanged."""

    @functools.wraps(f)
    def logged(arg: Any) -> R:
        _log.info(C.PHASE_PIPELINE, "computing", {
            "function": getattr(f, "__name__", repr(f)),
            "message": f"Computing for argument(s): {arg}",
        })
        return f(arg)

    return logged


def bilog(f: Callable[[Any, Any], R]) -> Callable[[Any, Any], R]:
    """Binary form of :func:`log`; records ``<arg1>,<arg2>``."""

    @functools.wraps(f)
    def logged(arg1: Any, arg2: Any) -> R:
        _log.info(C.PHASE_PIPELINE, "computing", {
            "function": getattr(f, "__name__", repr(f)),
            "message": f"Computing for argument(s): {arg1},{arg2}",
        })
        return f(arg1, arg2)

    return logged


# ──────────────────────────────────────────────────────────────
# Memoizer
# ──────────────────────────────────────────────────────────────

def _memoized(f: Callable[..., R], key_of: Callable[..., str]) -> Callable[..., R]:
    """
    Shared memoization core.

    The lock only guards lookups and inserts; *f* runs unlocked so a
    memoized function may recurse into itself or publish to listeners that
    call it again. Concurrent first calls for one key may each run *f*;
    ``setdefault`` keeps the first stored value and every caller returns it.
    A failing *f* stores nothing, so the next call retries.
    """
    cache: dict[str, R] = {}
    lock = threading.Lock()

    @functools.wraps(f)
    def memoized(*args: Any) -> R:
        key = key_of(*args)
        with lock:
            if key in cache:
                return cache[key]
        value = f(*args)
        with lock:
            return cache.setdefault(key, value)

    def cache_size() -> int:
        with lock:
            return len(cache)

    def cache_keys() -> tuple[str, ...]:
        with lock:
            return tuple(cache)

    memoized.cache_size = cache_size  # type: ignore[attr-defined]
    memoized.cache_keys = cache_keys  # type: ignore[attr-defined]
    return memoized


def memoize(f: Callable[[Any], R]) -> Callable[[Any], R]:
    """
    Cache *f*'s results keyed by ``str(arg)``.

    The cache is unbounded and private to this wrapper; wrapping an already
    memoized pipeline adds a second, independent cache.
    """
    return _memoized(f, lambda arg: str(arg))


def bimemoize(f: Callable[[Any, Any], R]) -> Callable[[Any, Any], R]:
    """
    Cache *f*'s results keyed by ``str(arg1) + str(arg2)``.

    No separator is inserted between the two parts, so argument pairs whose
    string forms concatenate identically share a cache entry.
    """
    return _memoized(f, lambda arg1, arg2: str(arg1) + str(arg2))
