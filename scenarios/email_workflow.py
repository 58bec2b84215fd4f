"""
scenarios/email_workflow.py — Department notification workflow.

Business operations (create a mailbox, send an announcement, delete a
mailbox) are wrapped in event-dispatcher pipelines so that the HR, Finance,
IT and Research services each hear about the result on their own topic.

The IT service reacts to the creation of the blocked user's mailbox by
building two new pipelines on the spot: a security-alert broadcast to every
department, then the mailbox deletion.

Example::

    wf = EmailWorkflow()
    wf.start_create_email("sandeep")      # → "sandeep@lexmark.com"
    wf.received[Department.HR]           # ["sandeep@lexmark.com"]
"""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Sequence

from core.config import ConduitConfig, load_config
from core.constants import C, Department
from core.logger import get_logger
from messaging.broker import MessageBroker
from messaging.dispatcher import event_dispatcher
from pipeline.composer import Composer

_log = get_logger()

Printer = Callable[[str], None]
StringFn = Callable[[str], str]

#: Departments notified when a mailbox is created (outermost first).
EMAIL_DEPARTMENTS: tuple[Department, ...] = (
    Department.IT, Department.HR, Department.FINANCE,
)

#: Departments notified by an announcement or security alert.
BROADCAST_DEPARTMENTS: tuple[Department, ...] = (
    Department.HR, Department.IT, Department.FINANCE, Department.RESEARCH,
)

#: Departments notified when a mailbox is deleted.
DELETE_DEPARTMENTS: tuple[Department, ...] = (Department.IT, Department.HR)


class EmailWorkflow:
    """
    Wires the broker, department listeners and business pipelines together.

    Args:
        broker: Broker to publish on. A fresh one is created when omitted.
        config: Runtime configuration; loaded via :func:`load_config` when
            omitted.
        out:    Sink for human-readable progress lines.
    """

    def __init__(
        self,
        broker: Optional[MessageBroker[str]] = None,
        config: Optional[ConduitConfig] = None,
        out: Printer = print,
    ) -> None:
        self._config = config if config is not None else load_config()
        self._broker: MessageBroker[str] = broker if broker is not None else MessageBroker()
        self._out = out
        scenario = self._config.scenario
        self._domain = scenario.email_domain
        self._blocked_email = f"{scenario.malicious_user}@{self._domain}"

        #: Messages each department has received, in arrival order.
        self.received: Dict[Department, List[str]] = {d: [] for d in Department}
        #: Every delivery as ``(department, message)``, in arrival order.
        self.deliveries: List[tuple[Department, str]] = []

        self._dispatchers = {
            dept: event_dispatcher(self._broker, dept.topic, self._config.dispatch.delay_s)
            for dept in Department
        }

        for dept in Department:
            listener = self._it_listener if dept is Department.IT else self._make_listener(dept)
            self._broker.subscribe(dept.topic, listener)

        self.start_create_email: StringFn = self.build_pipeline(
            EMAIL_DEPARTMENTS, self.create_email
        )
        self.start_announcement: StringFn = self.build_pipeline(
            BROADCAST_DEPARTMENTS, self.announcement
        )

    @property
    def broker(self) -> MessageBroker[str]:
        return self._broker

    # ── Pipeline builder ──────────────────────────────────────────────────────

    def build_pipeline(self, departments: Sequence[Department], source: StringFn) -> StringFn:
        """Wrap *source* so each of *departments* is notified of its result."""
        composer: Composer[str, str] = Composer([self._dispatchers[d] for d in departments])
        return composer.create_pipeline(source)

    # ── Business operations ───────────────────────────────────────────────────

    def create_email(self, name: str) -> str:
        email = f"{name}@{self._domain}"
        self._out(f"\nEmail Created: {email}")
        self._out("-" * 44)
        _log.info(C.PHASE_SCENARIO, "email_created", {"email": email})
        return email

    def announcement(self, message: str) -> str:
        self._out("\nAn important announcement has been sent to all departments!")
        self._out("-" * 68)
        _log.info(C.PHASE_SCENARIO, "announcement", {"message": message})
        return f"{message}!"

    def delete_email(self, email: str) -> str:
        self._out(f"\nEmail Deleted: {email}")
        self._out("-" * 68)
        _log.warn(C.PHASE_SCENARIO, "email_deleted", {"email": email})
        return f"Email {email} deleted."

    # ── Listeners ─────────────────────────────────────────────────────────────

    def _record(self, dept: Department, message: str) -> None:
        self.received[dept].append(message)
        self.deliveries.append((dept, message))
        self._out(f"{dept.label} SERVICE received message: {message}")
        _log.info(C.PHASE_SCENARIO, "message_received", {
            "department": dept.value,
            "message": message,
        })

    def _make_listener(self, dept: Department) -> Callable[[str], None]:
        def listener(message: str) -> None:
            self._record(dept, message)

        listener.__name__ = f"{dept.value.lower()}_listener"
        return listener

    def _it_listener(self, message: str) -> None:
        self._record(Department.IT, message)
        if message != self._blocked_email:
            return

        _log.critical(C.PHASE_SCENARIO, "security_alert", {"email": message})
        start_broadcast = self.build_pipeline(BROADCAST_DEPARTMENTS, self.announcement)
        start_delete = self.build_pipeline(DELETE_DEPARTMENTS, self.delete_email)

        start_broadcast(
            f"SECURITY ALERT: The email address {message} has been blocked due to security reasons"
        )
        self._pause(self._config.scenario.alert_pause_ms)
        start_delete(message)

    # ── Demo driver ───────────────────────────────────────────────────────────

    def run(
        self,
        names: Optional[Sequence[str]] = None,
        announcement: str = "Announcement: Business will remain closed tomorrow",
    ) -> List[str]:
        """
        Create a mailbox for the first name, send *announcement*, then create
        the remaining mailboxes. Returns every pipeline result in order.

        Pauses for ``demo_pause_ms`` before the announcement and for
        ``create_pause_ms`` before each later mailbox.

        *names* defaults to ``("sandeep.mohanty", <configured malicious user>)``.

        Raises:
            ValueError: If *names* is empty.
        """
        if names is None:
            names = ("sandeep.mohanty", self._config.scenario.malicious_user)
        if not names:
            raise ValueError("run() needs at least one name")
        results: List[str] = []
        first, *rest = names
        results.append(self.start_create_email(first))
        self._pause(self._config.scenario.demo_pause_ms)
        results.append(self.start_announcement(announcement))
        for name in rest:
            self._pause(self._config.scenario.create_pause_ms)
            results.append(self.start_create_email(name))
        return results

    @staticmethod
    def _pause(ms: int) -> None:
        if ms > 0:
            time.sleep(ms / 1000.0)
