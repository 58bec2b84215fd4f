"""
scenarios — Demonstrations driving the pipeline, messaging and tailcall
packages as an ordinary caller would.
"""

from .basics import basic_demo, composition_demo
from .email_workflow import EmailWorkflow
from .tail_sums import recursive_sum_demo, tail_sum_demo

__all__ = [
    "basic_demo",
    "composition_demo",
    "EmailWorkflow",
    "tail_sum_demo",
    "recursive_sum_demo",
]
