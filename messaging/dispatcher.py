"""
messaging/dispatcher.py — Decorator factories that publish a pipeline
stage's result to a fixed broker topic.

The topic is captured when the factory is created. The wrapped stage runs
first, then (after an optional blocking delay that simulates downstream
latency) its result is published, and only then returned — so every
listener has run before the caller sees the result::

    it_dispatch = event_dispatcher(broker, Department.IT.topic)
    create = compose([it_dispatch, hr_dispatch], create_email)
"""

from __future__ import annotations

import functools
import time
from typing import Any, Callable, TypeVar

from core.constants import C
from core.logger import get_logger
from messaging.broker import MessageBroker

R = TypeVar("R")

_log = get_logger()

UnaryFactory = Callable[[Callable[[Any], R]], Callable[[Any], R]]
BinaryFactory = Callable[[Callable[[Any, Any], R]], Callable[[Any, Any], R]]


def _describe(message: Any) -> str:
    """Short printable form of a message for log lines."""
    text = str(message)
    return text if len(text) <= 80 else text[:77] + "..."


def _check_delay(delay_s: float) -> None:
    if delay_s < 0:
        raise ValueError(f"delay_s must be >= 0, got {delay_s}")


def _dispatch(broker: MessageBroker, topic: str, delay_s: float, result: Any) -> None:
    """Pause, publish, and record how long the listeners took."""
    if delay_s > 0:
        time.sleep(delay_s)
    _t = time.perf_counter()
    broker.publish(topic, result)
    _log.perf(C.PHASE_DISPATCH, "dispatched",
              (time.perf_counter() - _t) * 1_000.0,
              {"topic": topic, "message": _describe(result)})


def event_dispatcher(
    broker: MessageBroker,
    topic: str,
    delay_s: float = 0.0,
) -> UnaryFactory:
    """
    Build a unary decorator factory publishing to *topic*.

    Args:
        broker:  Broker to publish on.
        topic:   Fixed destination topic.
        delay_s: Blocking pause before each publish, in seconds.

    Raises:
        ValueError: If *delay_s* is negative.
    """
    _check_delay(delay_s)

    def dispatcher(f: Callable[[Any], R]) -> Callable[[Any], R]:
        @functools.wraps(f)
        def dispatching(arg: Any) -> R:
            result = f(arg)
            _dispatch(broker, topic, delay_s, result)
            return result

        return dispatching

    dispatcher.__name__ = f"dispatch[{topic}]"
    dispatcher.topic = topic  # type: ignore[attr-defined]
    return dispatcher


def bi_event_dispatcher(
    broker: MessageBroker,
    topic: str,
    delay_s: float = 0.0,
) -> BinaryFactory:
    """Binary form of :func:`event_dispatcher`."""
    _check_delay(delay_s)

    def dispatcher(f: Callable[[Any, Any], R]) -> Callable[[Any, Any], R]:
        @functools.wraps(f)
        def dispatching(arg1: Any, arg2: Any) -> R:
            result = f(arg1, arg2)
            _dispatch(broker, topic, delay_s, result)
            return result

        return dispatching

    dispatcher.__name__ = f"bidispatch[{topic}]"
    dispatcher.topic = topic  # type: ignore[attr-defined]
    return dispatcher
