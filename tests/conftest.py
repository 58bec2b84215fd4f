"""
tests/conftest.py — Shared pytest setup.

Points the JSONL logger at a throwaway directory before any Conduit module
is imported, so test runs never write into the source tree.
"""

from __future__ import annotations

import os
import tempfile

os.environ.setdefault("CONDUIT_LOG_DIR", tempfile.mkdtemp(prefix="conduit-test-logs-"))
os.environ.pop("CONDUIT_CONFIG", None)

import pytest  # noqa: E402

from core.config import ConduitConfig, load_config  # noqa: E402
from messaging.broker import MessageBroker  # noqa: E402


@pytest.fixture()
def broker() -> MessageBroker:
    """Fresh broker with no topics."""
    return MessageBroker()


@pytest.fixture()
def config() -> ConduitConfig:
    """Built-in defaults with every simulated delay forced to zero."""
    return load_config(overrides={
        "dispatch": {"delay_ms": 0},
        "scenario": {"alert_pause_ms": 0, "demo_pause_ms": 0, "create_pause_ms": 0},
    })
