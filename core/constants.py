"""
core/constants.py — System constants for Conduit.

Single frozen dataclass of class-level defaults: department topic names,
the demo e-mail domain, structured-log phase names and tail-call sizes.
Values that operators may tune at runtime live in :mod:`core.config`;
these are the defaults it falls back to.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


# ──────────────────────────────────────────────────────────────
# Departments
# ──────────────────────────────────────────────────────────────

class Department(Enum):
    """Services that listen for business events in the e-mail workflow."""

    HR = "HR"
    FINANCE = "FINANCE"
    IT = "IT"
    RESEARCH = "RESEARCH"

    @property
    def topic(self) -> str:
        """Broker topic this department listens on, e.g. ``'HR_SERVICE: EMAIL_CREATED'``."""
        return f"{self.value}_SERVICE: EMAIL_CREATED"

    @property
    def label(self) -> str:
        """Name printed by the department's listener, e.g. ``'R & D'`` for Research."""
        return "R & D" if self is Department.RESEARCH else self.value


# ──────────────────────────────────────────────────────────────
# Frozen constants dataclass
# ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ConduitConstants:
    """
    Frozen dataclass holding Conduit's built-in defaults.

    Use the class attributes directly — do not instantiate this class.

    Example::

        from core.constants import C, Department

        print(C.EMAIL_DOMAIN)        # lexmark.com
        print(Department.IT.topic)   # IT_SERVICE: EMAIL_CREATED
    """

    # ── Demo scenario ─────────────────────────────────────────
    EMAIL_DOMAIN: ClassVar[str] = "lexmark.com"
    """Domain appended by the create-email business operation."""

    MALICIOUS_USER: ClassVar[str] = "malicious.user"
    """User name whose mailbox triggers the IT security-alert cascade."""

    # ── Tail-call demo sizes ──────────────────────────────────
    TAIL_SUM_COUNT: ClassVar[int] = 100_000
    """Default ``count`` for the trampolined sum demo."""

    RECURSIVE_SUM_COUNT: ClassVar[int] = 1_000_000
    """Default ``count`` for the naive recursive sum demo (expected to overflow)."""

    # ── Structured log phases ─────────────────────────────────
    PHASE_PIPELINE: ClassVar[str] = "pipeline"
    PHASE_BROKER: ClassVar[str] = "broker"
    PHASE_DISPATCH: ClassVar[str] = "dispatch"
    PHASE_TAILCALL: ClassVar[str] = "tailcall"
    PHASE_SCENARIO: ClassVar[str] = "scenario"

    # ── Departments reference ─────────────────────────────────
    Departments: ClassVar[type[Department]] = Department
    """Convenience reference to :class:`Department` — use ``C.Departments.IT``."""


#: Convenience alias — ``from core.constants import C``
C = ConduitConstants

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARN", "ERROR")
"""Accepted values for ``logging.level`` in ``conduit.yaml`` and ``--log-level``."""
