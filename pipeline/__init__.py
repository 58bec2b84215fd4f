"""
pipeline — Higher-order pipeline composition.

A pipeline is a source function wrapped in an ordered chain of decorator
factories (logging, memoization, event dispatch). The first listed factory
is the outermost wrapper.
"""

from .composer import BiComposer, Composer, bicompose, compose
from .decorators import bilog, bimemoize, log, memoize

__all__ = [
    "Composer",
    "BiComposer",
    "compose",
    "bicompose",
    "log",
    "bilog",
    "memoize",
    "bimemoize",
]
