"""
messaging — In-process publish/subscribe.

A :class:`MessageBroker` fans messages out to topic listeners synchronously;
:func:`event_dispatcher` turns a topic into a pipeline decorator factory.
"""

from .broker import MessageBroker
from .dispatcher import bi_event_dispatcher, event_dispatcher

__all__ = [
    "MessageBroker",
    "event_dispatcher",
    "bi_event_dispatcher",
]
