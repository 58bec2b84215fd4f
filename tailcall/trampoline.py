"""
tailcall/trampoline.py — Stack-safe tail recursion.

A step function written in continuation-passing form returns either
``Done(value)`` or ``Next(thunk)`` instead of recursing. :func:`trampoline`
drives the thunks in a loop, so the Python stack stays flat however many
logical steps the computation takes::

    total = trampoline(tail_sum)(100_000, 0)   # 5000050000
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class Done(Generic[V]):
    """Terminal continuation carrying the final value."""

    value: V


@dataclass(frozen=True)
class Next(Generic[V]):
    """Pending continuation: calling ``thunk()`` yields the next step."""

    thunk: Callable[[], "Result[V]"]


Result = Union[Done[V], Next[V]]


def trampoline(f: Callable[..., Result[V]]) -> Callable[..., V]:
    """
    Turn a continuation-returning step function into an ordinary function.

    Any exception raised by *f* or by a thunk propagates immediately.

    Raises:
        TypeError: If a step returns something other than :class:`Done` or
            :class:`Next`.
    """

    @functools.wraps(f)
    def bounced(*args: Any, **kwargs: Any) -> V:
        res = f(*args, **kwargs)
        steps = 0
        while isinstance(res, Next):
            res = res.thunk()
            steps += 1
        if not isinstance(res, Done):
            raise TypeError(
                f"{getattr(f, '__name__', f)!r} step {steps} returned "
                f"{type(res).__name__}, expected Done or Next"
            )
        logger.debug("Trampoline %s finished after %d step(s)",
                     getattr(f, "__name__", f), steps)
        return res.value

    return bounced


# ──────────────────────────────────────────────────────────────
# Sums
# ──────────────────────────────────────────────────────────────

def tail_sum(count: int, accu: int = 0) -> Result[int]:
    """
    Continuation-passing ``count + (count - 1) + … + 1 + accu``.

    Raises:
        ValueError: If *count* is negative; the countdown would never reach 0.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if count == 0:
        return Done(accu)
    return Next(lambda: tail_sum(count - 1, accu + count))


def recursive_sum(count: int) -> int:
    """
    Naive recursive sum, one stack frame per step.

    Raises ``RecursionError`` once *count* approaches
    ``sys.getrecursionlimit()``; kept as the baseline :func:`tail_sum` is
    measured against. A negative *count* raises ``ValueError``.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if count == 0:
        return 0
    return count + recursive_sum(count - 1)
