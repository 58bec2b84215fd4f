"""
main.py — Conduit command-line entry point.

Parses CLI args, loads configuration, and runs one of the demos that drive
the pipeline composer, the message broker and the trampoline.
"""

from __future__ import annotations

import argparse
import os
import sys
import traceback
from typing import Callable, Optional

_DEMOS: tuple[str, ...] = ("basic", "composition", "usecase", "tail-sum", "recursive-sum")


# ──────────────────────────────────────────────────────────────
# Argument parsing
# ──────────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="conduit",
        description="Conduit — in-process event dispatch and pipeline composition demos",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument(
        "--demo",
        choices=_DEMOS,
        default="usecase",
        help="Which demo to run",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to a conduit.yaml file (default: CONDUIT_CONFIG or config/conduit.yaml)",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        default=None,
        help="Minimum level written to the JSONL log (overrides the config file)",
    )
    p.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number to sum for the tail-sum / recursive-sum demos",
    )
    return p


# ──────────────────────────────────────────────────────────────
# Demo dispatch
# ──────────────────────────────────────────────────────────────

def _select_demo(args: argparse.Namespace, config) -> Callable[[], object]:
    """Map the ``--demo`` choice to a zero-argument callable."""
    from scenarios import (
        EmailWorkflow,
        basic_demo,
        composition_demo,
        recursive_sum_demo,
        tail_sum_demo,
    )

    invocations: dict[str, Callable[[], object]] = {
        "basic": basic_demo,
        "composition": composition_demo,
        "usecase": lambda: EmailWorkflow(config=config).run(),
        "tail-sum": lambda: tail_sum_demo(
            args.count if args.count is not None else config.tailcall.count
        ),
        "recursive-sum": lambda: recursive_sum_demo(
            args.count if args.count is not None else config.tailcall.recursive_count
        ),
    }
    return invocations[args.demo]


# ──────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point. Returns process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.count is not None and args.count < 0:
        parser.error("--count must be >= 0")

    # 1. Configuration (before the logger so log_dir can come from it)
    from core.config import load_config
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    os.environ.setdefault("CONDUIT_LOG_DIR", config.logging.log_dir)

    # 2. Structured logger
    from core.logger import get_logger
    log = get_logger()
    log.set_min_level(args.log_level or config.logging.level)
    log.info("main", "args_parsed", {
        "demo": args.demo,
        "config": args.config,
        "log_level": args.log_level,
        "count": args.count,
    })

    # 3. Run
    exit_code = 0
    try:
        _select_demo(args, config)()
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted")
        exit_code = 130
    except Exception:                              # noqa: BLE001
        tb = traceback.format_exc()
        print(tb, file=sys.stderr)
        log.critical("main", "unhandled_exception", {"traceback": tb})
        exit_code = 1
    finally:
        log.flush()

    log.info("main", "exit", {"code": exit_code})
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
