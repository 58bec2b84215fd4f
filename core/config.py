"""
core/config.py — Typed configuration loader for Conduit.

Loads config/conduit.yaml and validates all values into typed dataclasses.
Downstream modules take a :class:`ConduitConfig`; never read YAML directly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from core.constants import C, LOG_LEVELS

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Dataclass hierarchy — mirrors conduit.yaml
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class DispatchConfig:
    """Event-dispatcher tuning."""

    delay_ms: int = 0
    """Blocking pause before each publish, simulating downstream latency."""

    @property
    def delay_s(self) -> float:
        """``delay_ms`` in seconds, as passed to the dispatcher factories."""
        return self.delay_ms / 1000.0


@dataclass(frozen=True)
class ScenarioConfig:
    """E-mail workflow demo settings."""

    email_domain: str = C.EMAIL_DOMAIN
    malicious_user: str = C.MALICIOUS_USER
    alert_pause_ms: int = 0
    """Pause between the security alert and the mailbox deletion."""

    demo_pause_ms: int = 0
    """Pause before the announcement in the e-mail demo."""

    create_pause_ms: int = 0
    """Pause before each mailbox created after the announcement."""


@dataclass(frozen=True)
class TailCallConfig:
    """Sizes for the tail-call demos."""

    count: int = C.TAIL_SUM_COUNT
    recursive_count: int = C.RECURSIVE_SUM_COUNT


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str = "INFO"
    log_dir: str = "logs"


@dataclass(frozen=True)
class ConduitConfig:
    """Root configuration object — single source of truth for all settings."""

    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)
    tailcall: TailCallConfig = field(default_factory=TailCallConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict:
        """Plain nested dict, suitable for logging or dumping back to YAML."""
        return asdict(self)


# ──────────────────────────────────────────────
# Loader
# ──────────────────────────────────────────────


def _merge(defaults: dict, overrides: dict) -> dict:
    """
    Deep-merge *overrides* into *defaults*, returning a new dict.

    Nested dicts are merged recursively; scalar values in overrides win.
    """
    result: dict = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_path(config_path: Path | str | None) -> Path | None:
    """Apply the search order: argument, ``CONDUIT_CONFIG``, project ``config/``."""
    if config_path is not None:
        resolved = Path(config_path)
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")
        return resolved
    if "CONDUIT_CONFIG" in os.environ:
        resolved = Path(os.environ["CONDUIT_CONFIG"])
        if not resolved.exists():
            raise FileNotFoundError(
                f"CONDUIT_CONFIG points to missing file: {resolved}"
            )
        return resolved
    candidate = Path(__file__).resolve().parent.parent / "config" / "conduit.yaml"
    if candidate.exists():
        return candidate
    return None


def load_config(
    config_path: Path | str | None = None,
    overrides: dict | None = None,
) -> ConduitConfig:
    """
    Load, validate, and return a ConduitConfig from a YAML file.

    The search order for the config file is:
    1. *config_path* argument (if provided)
    2. CONDUIT_CONFIG environment variable
    3. ``config/conduit.yaml`` at the project root
    4. Built-in defaults (no file required)

    Args:
        config_path: Optional path to a ``conduit.yaml`` file.
        overrides: Optional nested dict merged on top of the file contents,
            e.g. ``{"dispatch": {"delay_ms": 0}}``.

    Returns:
        A fully populated and frozen :class:`ConduitConfig` instance.

    Raises:
        ValueError: If a field has an unknown name, an invalid type or value.
        FileNotFoundError: If *config_path* is explicitly given but does not exist.
    """
    resolved_path = _resolve_path(config_path)

    raw: dict = {}
    if resolved_path is not None:
        logger.info("Loading config from: %s", resolved_path)
        with resolved_path.open("r", encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML mapping, got: {type(loaded)}")
        raw = loaded
    else:
        logger.info("No config file found — using built-in defaults")

    if overrides:
        raw = _merge(raw, overrides)

    unknown = set(raw) - {"dispatch", "scenario", "tailcall", "logging"}
    if unknown:
        raise ValueError(f"Unknown config section(s): {sorted(unknown)}")

    try:
        dispatch_cfg = DispatchConfig(**(raw.get("dispatch") or {}))
        scenario_cfg = ScenarioConfig(**(raw.get("scenario") or {}))
        tailcall_cfg = TailCallConfig(**(raw.get("tailcall") or {}))
        log_cfg = LoggingConfig(**(raw.get("logging") or {}))
    except TypeError as exc:
        raise ValueError(f"Invalid config value: {exc}") from exc

    _validate_config(dispatch_cfg, scenario_cfg, tailcall_cfg, log_cfg)

    config = ConduitConfig(
        dispatch=dispatch_cfg,
        scenario=scenario_cfg,
        tailcall=tailcall_cfg,
        logging=log_cfg,
    )
    logger.debug("Config loaded: %s", config)
    return config


def _validate_config(
    dispatch: DispatchConfig,
    scenario: ScenarioConfig,
    tailcall: TailCallConfig,
    log_cfg: LoggingConfig,
) -> None:
    """
    Validate value constraints on the loaded configuration.

    Raises:
        ValueError: If any configured value has the wrong type or violates
            a hard constraint.
    """
    for section, name, value in (
        ("dispatch", "delay_ms", dispatch.delay_ms),
        ("scenario", "alert_pause_ms", scenario.alert_pause_ms),
        ("scenario", "demo_pause_ms", scenario.demo_pause_ms),
        ("scenario", "create_pause_ms", scenario.create_pause_ms),
        ("tailcall", "count", tailcall.count),
        ("tailcall", "recursive_count", tailcall.recursive_count),
    ):
        # bool is an int subclass; ``delay_ms: yes`` is still a typo
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(
                f"{section}.{name} must be an integer, got {type(value).__name__} {value!r}"
            )
    for section, name, value in (
        ("scenario", "email_domain", scenario.email_domain),
        ("scenario", "malicious_user", scenario.malicious_user),
        ("logging", "level", log_cfg.level),
        ("logging", "log_dir", log_cfg.log_dir),
    ):
        if not isinstance(value, str):
            raise ValueError(
                f"{section}.{name} must be a string, got {type(value).__name__} {value!r}"
            )

    if dispatch.delay_ms < 0:
        raise ValueError(f"dispatch.delay_ms must be >= 0, got {dispatch.delay_ms}")
    pauses = {
        "alert_pause_ms": scenario.alert_pause_ms,
        "demo_pause_ms": scenario.demo_pause_ms,
        "create_pause_ms": scenario.create_pause_ms,
    }
    if any(v < 0 for v in pauses.values()):
        raise ValueError(f"scenario pauses must be >= 0, got {pauses}")
    if not scenario.email_domain:
        raise ValueError("scenario.email_domain must not be empty")
    if tailcall.count < 0 or tailcall.recursive_count < 0:
        raise ValueError(
            f"tailcall counts must be >= 0, got count={tailcall.count}, "
            f"recursive_count={tailcall.recursive_count}"
        )
    if log_cfg.level not in LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, got '{log_cfg.level}'"
        )
