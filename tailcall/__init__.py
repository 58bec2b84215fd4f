"""
tailcall — Trampolined tail recursion with O(1) stack depth.
"""

from .trampoline import Done, Next, Result, recursive_sum, tail_sum, trampoline

__all__ = [
    "Done",
    "Next",
    "Result",
    "trampoline",
    "tail_sum",
    "recursive_sum",
]
