"""
scenarios/tail_sums.py — Trampolined vs. naive recursive summation.
"""

from __future__ import annotations

import sys
import time
from typing import Callable, Optional

from core.constants import C
from core.logger import get_logger
from tailcall import recursive_sum, tail_sum, trampoline

_log = get_logger()

Printer = Callable[[str], None]


def tail_sum_demo(count: int = C.TAIL_SUM_COUNT, out: Printer = print) -> int:
    """Sum ``1..count`` through the trampoline and print the result."""
    _t = time.perf_counter()
    total = trampoline(tail_sum)(count, 0)
    _log.perf(C.PHASE_TAILCALL, "tail_sum_done",
              (time.perf_counter() - _t) * 1_000.0, {"count": count, "total": total})
    out(f"\nTail Optimized Sum: {total}")
    return total


def recursive_sum_demo(count: int = C.RECURSIVE_SUM_COUNT, out: Printer = print) -> Optional[int]:
    """
    Sum ``1..count`` by plain recursion.

    Returns ``None`` and reports the overflow instead of raising when
    *count* exceeds what the interpreter's recursion limit allows.
    """
    try:
        total = recursive_sum(count)
    except RecursionError:
        _log.warn(C.PHASE_TAILCALL, "recursive_sum_overflow", {
            "count": count,
            "recursion_limit": sys.getrecursionlimit(),
        })
        out(f"\nRecursive Sum: stack overflow at count={count} "
            f"(recursion limit {sys.getrecursionlimit()})")
        return None
    out(f"\nRecursive Sum: {total}")
    return total
