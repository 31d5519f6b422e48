from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path

from dispatch.configuration import ConfigError, load_dispatch_config
from dispatch.contracts import DispatchConfig, TrackingClient
from dispatch.errors import NotFoundError
from dispatch.orchestration import Dispatcher
from suites.catalog import build_catalog


def _build_tracking(config: DispatchConfig) -> TrackingClient | None:
    if config.tracking is None:
        return None
    from dispatch.tracking import MlflowTrackingClient

    tracking_uri = config.tracking.tracking_uri or os.environ.get("MLFLOW_TRACKING_URI")
    return MlflowTrackingClient(
        tracking_uri=tracking_uri,
        experiment_name=config.tracking.experiment_name,
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one test suite from a catalog YAML.")
    parser.add_argument("catalog_yaml", type=Path, help="Path to dispatch config YAML")
    parser.add_argument("suite", nargs="?", help="Suite name to run (omit with --list)")
    parser.add_argument("--list", action="store_true", help="List suites and exit")
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=0.5,
        help="Seconds between status polls",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Cancel the run after this many seconds",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    try:
        config = load_dispatch_config(args.catalog_yaml)
    except ConfigError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.dispatcher.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    catalog = build_catalog(config)

    if args.list:
        for info in catalog.list():
            print(f"{info.key}\t{info.description or info.name}")
        return 0
    if not args.suite:
        print("suite name is required unless --list is given", file=sys.stderr)
        return 2

    with Dispatcher(
        catalog,
        tracking=_build_tracking(config),
        retain_finished=config.dispatcher.retain_finished,
    ) as dispatcher:
        try:
            run_id = dispatcher.start(args.suite)
        except NotFoundError as exc:
            print(str(exc), file=sys.stderr)
            return 2

        deadline = None if args.timeout is None else time.monotonic() + args.timeout
        cancelled = False
        try:
            status = dispatcher.get_status(run_id)
            while not status.is_terminal:
                if deadline is not None and not cancelled and time.monotonic() >= deadline:
                    dispatcher.cancel(run_id)
                    cancelled = True
                time.sleep(args.poll_interval)
                status = dispatcher.get_status(run_id)
        except NotFoundError:
            print(f"run {run_id} is no longer available", file=sys.stderr)
            return 1

    print(json.dumps(status.to_dict(), indent=2, sort_keys=True, default=str))
    return 0 if status.status == "completed" else 1


if __name__ == "__main__":
    raise SystemExit(main())
