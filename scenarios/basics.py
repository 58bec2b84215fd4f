"""
scenarios/basics.py — Memoization and composition walkthroughs.

Both demos wrap ``sqrt``, ``add`` and ``echo`` with logging and memoization,
call each twice, and return what they computed. The second round is served
from the memoizer caches, so the "computing" log entries appear only once.
"""

from __future__ import annotations

import math
from typing import Callable

from pipeline import BiComposer, Composer, bilog, bimemoize, log, memoize

Printer = Callable[[str], None]


def _add(x: float, y: float) -> float:
    return x + y


def _echo(text: str) -> str:
    return text


def _run_rounds(
    title: str,
    sqrt: Callable[[float], float],
    add: Callable[[float, float], float],
    echo: Callable[[str], str],
    out: Printer,
) -> list[tuple[float, float, str]]:
    rounds = []
    for label in ("Computed", "Optimized"):
        out(f"\n{label} ({title}):")
        out("-" * (len(label) + len(title) + 4))
        row = (sqrt(16), add(16, 10), echo("Echoeeeeeeeeeeeeeeeed"))
        out(f"Square root result: {row[0]}")
        out(f"Addition result: {row[1]}")
        out(f"Echo result: {row[2]}")
        rounds.append(row)
    return rounds


def basic_demo(out: Printer = print) -> list[tuple[float, float, str]]:
    """Decorators applied by hand: ``memoize(log(f))``."""
    return _run_rounds(
        "Basic Function Demo",
        memoize(log(math.sqrt)),
        bimemoize(bilog(_add)),
        memoize(log(_echo)),
        out,
    )


def composition_demo(out: Printer = print) -> list[tuple[float, float, str]]:
    """The same wrappers, built by :class:`Composer` and :class:`BiComposer`."""
    unary = Composer([memoize, log])
    binary = BiComposer([bimemoize, bilog])
    return _run_rounds(
        "Composition Function Demo",
        unary.create_pipeline(math.sqrt),
        binary.create_pipeline(_add),
        unary.create_pipeline(_echo),
        out,
    )
