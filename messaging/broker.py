"""
messaging/broker.py — In-process topic-based publish/subscribe broker.

Delivery is synchronous: :meth:`MessageBroker.publish` calls every listener
of the topic, in subscription order, on the publishing thread, and returns
only after the last one finishes. Listeners may publish or subscribe again
from inside their own invocation.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, Generic, List, TypeVar

from core.constants import C
from core.logger import get_logger

logger = logging.getLogger(__name__)
_log = get_logger()

M = TypeVar("M")

Listener = Callable[[M], None]


class MessageBroker(Generic[M]):
    """
    Topic → ordered listener list registry with synchronous fan-out.

    Topics are created implicitly by the first :meth:`subscribe`. There is
    no unsubscribe: registrations live as long as the broker. Subscribing
    the same listener twice registers it twice, and it then receives every
    message twice.

    A listener that raises aborts delivery to the listeners after it for
    that publish. The failure is logged and re-raised to the publisher
    unchanged.

    Thread-safe: one lock guards the topic table. It is never held while a
    listener runs.

    Example::

        broker = MessageBroker[str]()
        broker.subscribe("IT_SERVICE: EMAIL_CREATED", print)
        broker.publish("IT_SERVICE: EMAIL_CREATED", "sandeep@lexmark.com")
    """

    def __init__(self) -> None:
        self._topics: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    # ── Registration ──────────────────────────────────────────────────────────

    def subscribe(self, topic: str, listener: Listener) -> None:
        """
        Append *listener* to *topic*'s delivery list.

        Args:
            topic:    Non-empty topic name.
            listener: Callable ``(message) → None``.

        Raises:
            ValueError: If *topic* is not a non-empty string.
            TypeError:  If *listener* is not callable.
        """
        if not isinstance(topic, str) or not topic:
            raise ValueError(f"Topic must be a non-empty string, got {topic!r}")
        if not callable(listener):
            raise TypeError(f"Listener for {topic!r} is not callable: {listener!r}")
        with self._lock:
            self._topics[topic].append(listener)
            count = len(self._topics[topic])
        _log.info(C.PHASE_BROKER, "subscribed", {
            "topic": topic,
            "listener": getattr(listener, "__name__", repr(listener)),
            "subscribers": count,
        })

    # ── Delivery ──────────────────────────────────────────────────────────────

    def publish(self, topic: str, message: M) -> None:
        """
        Deliver *message* to every listener currently subscribed to *topic*.

        Publishing to a topic nobody listens on is a no-op. Listeners added
        while this call is delivering do not receive this message.

        Args:
            topic:   Topic name.
            message: Passed verbatim to each listener.
        """
        with self._lock:
            listeners = tuple(self._topics.get(topic, ()))
        if not listeners:
            logger.debug("No subscribers for topic %r — message dropped", topic)
            return

        _log.info(C.PHASE_BROKER, "published", {
            "topic": topic,
            "subscribers": len(listeners),
        })
        for index, listener in enumerate(listeners):
            try:
                listener(message)
            except Exception as exc:
                _log.error(C.PHASE_BROKER, "listener_failed", {
                    "topic": topic,
                    "listener": getattr(listener, "__name__", repr(listener)),
                    "index": index,
                    "skipped": len(listeners) - index - 1,
                    "error": repr(exc),
                })
                raise

    # ── Introspection ─────────────────────────────────────────────────────────

    @property
    def topics(self) -> tuple[str, ...]:
        """Known topics in creation order."""
        with self._lock:
            return tuple(self._topics)

    def has_topic(self, topic: str) -> bool:
        """``True`` once at least one listener has subscribed to *topic*."""
        with self._lock:
            return topic in self._topics

    def subscriber_count(self, topic: str) -> int:
        """Number of registrations on *topic* (duplicates counted)."""
        with self._lock:
            return len(self._topics.get(topic, ()))

    def __repr__(self) -> str:
        with self._lock:
            summary = {t: len(ls) for t, ls in self._topics.items()}
        return f"MessageBroker({summary})"
