"""
pipeline/composer.py — Builds one callable from a source function plus an
ordered list of decorator factories.

Factories are listed in notification priority order: the first listed
factory becomes the outermost wrapper, so ``compose([a, b, c], s)`` behaves
like ``a(b(c(s)))``. Unary and binary sources get separate composers::

    email = Composer([it_dispatch, hr_dispatch]).create_pipeline(create_email)
    add = BiComposer([bimemoize, bilog]).create_pipeline(operator.add)
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Sequence, TypeVar

from core.errors import CompositionError

logger = logging.getLogger(__name__)

T = TypeVar("T")
T1 = TypeVar("T1")
T2 = TypeVar("T2")
R = TypeVar("R")

UnaryFn = Callable[[T], R]
BinaryFn = Callable[[T1, T2], R]
UnaryFactory = Callable[[Callable[[T], R]], Callable[[T], R]]
BinaryFactory = Callable[[Callable[[T1, T2], R]], Callable[[T1, T2], R]]


def _checked_reversed(factories: Sequence[Callable]) -> tuple[Callable, ...]:
    """Validate every factory and return them in application (reversed) order."""
    for position, factory in enumerate(factories):
        if not callable(factory):
            raise CompositionError(
                f"Decorator factory at position {position} is not callable: {factory!r}",
                position=position,
                obj=factory,
            )
    return tuple(reversed(factories))


def _fold(factories: tuple[Callable, ...], source: Callable) -> Callable:
    if not callable(source):
        raise CompositionError(
            f"Pipeline source is not callable: {source!r}", obj=source
        )
    pipeline = source
    for factory in factories:
        pipeline = factory(pipeline)
    logger.debug(
        "Pipeline built for %s with %d decorator(s)",
        getattr(source, "__name__", repr(source)),
        len(factories),
    )
    return pipeline


class Composer(Generic[T, R]):
    """
    Composer for unary pipelines ``(T) -> R``.

    The factory list is copied and reversed once, here; the caller's list is
    left untouched. A composer is reusable: every :meth:`create_pipeline`
    call yields a fresh pipeline built from new decorator instances.

    Args:
        factories: Decorator factories in registration order. May be empty.

    Raises:
        CompositionError: If any entry is not callable.
    """

    def __init__(self, factories: Sequence[UnaryFactory] = ()) -> None:
        self._fns = _checked_reversed(list(factories))

    @property
    def factories(self) -> tuple[UnaryFactory, ...]:
        """Factories in registration order (outermost first)."""
        return tuple(reversed(self._fns))

    def create_pipeline(self, source: UnaryFn) -> UnaryFn:
        """
        Wrap *source* in every registered factory.

        Raises:
            CompositionError: If *source* is not callable.
        """
        return _fold(self._fns, source)

    def __len__(self) -> int:
        return len(self._fns)

    def __repr__(self) -> str:
        names = [getattr(f, "__name__", repr(f)) for f in self.factories]
        return f"Composer({names})"


class BiComposer(Generic[T1, T2, R]):
    """
    Composer for binary pipelines ``(T1, T2) -> R``.

    Same ordering and reuse rules as :class:`Composer`; kept as a separate
    class so unary and binary factories cannot be mixed by accident.
    """

    def __init__(self, factories: Sequence[BinaryFactory] = ()) -> None:
        self._fns = _checked_reversed(list(factories))

    @property
    def factories(self) -> tuple[BinaryFactory, ...]:
        """Factories in registration order (outermost first)."""
        return tuple(reversed(self._fns))

    def create_pipeline(self, source: BinaryFn) -> BinaryFn:
        """
        Wrap *source* in every registered factory.

        Raises:
            CompositionError: If *source* is not callable.
        """
        return _fold(self._fns, source)

    def __len__(self) -> int:
        return len(self._fns)

    def __repr__(self) -> str:
        names = [getattr(f, "__name__", repr(f)) for f in self.factories]
        return f"BiComposer({names})"


def compose(factories: Sequence[UnaryFactory], source: UnaryFn) -> UnaryFn:
    """One-shot ``Composer(factories).create_pipeline(source)``."""
    return Composer(factories).create_pipeline(source)


def bicompose(factories: Sequence[BinaryFactory], source: BinaryFn) -> BinaryFn:
    """One-shot ``BiComposer(factories).create_pipeline(source)``."""
    return BiComposer(factories).create_pipeline(source)
