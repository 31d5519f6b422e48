from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable, Mapping
from functools import partial
from types import TracebackType

from dispatch.contracts import RunStatusReport, Spawner, SuiteCatalog, TrackingClient
from dispatch.errors import DecodeError, NotFoundError, OutputError, RunError, SpawnError
from dispatch.orchestration.ids import RunIdGenerator
from dispatch.orchestration.run_record import Completed, Failed, RunRecord
from dispatch.runtime.process import SubprocessHandle, SubprocessSpawner

logger = logging.getLogger("suite_dispatch.dispatcher")


class Dispatcher:
    """
    Registry of suite runs keyed by run id.

    start() launches a process and returns at once; the process exit callback
    is the only writer of a run's terminal state.
    """

    def __init__(
        self,
        catalog: SuiteCatalog,
        *,
        spawner: Spawner | None = None,
        tracking: TrackingClient | None = None,
        retain_finished: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if retain_finished is not None and retain_finished < 1:
            raise ValueError("retain_finished must be >= 1 when provided")
        self._catalog = catalog
        self._spawner = spawner or SubprocessSpawner()
        self._tracking = tracking
        self._retain_finished = retain_finished
        self._clock = clock
        self._ids = RunIdGenerator()
        self._runs: dict[str, RunRecord] = {}
        self._finished_order: deque[str] = deque()
        self._lock = threading.Lock()

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    def start(self, suite: str) -> str:
        # Held across spawn + insert so the exit callback always finds the record.
        # Lookups of other runs wait for the fork inside spawn() meanwhile.
        with self._lock:
            if not self._catalog.has(suite):
                raise NotFoundError(suite)
            run_id = self._ids.next_id()
            try:
                command = self._catalog.make_run_command(suite)
            except Exception as exc:
                record = self._failed_before_launch(run_id, suite, exc)
                self._runs[run_id] = record
            else:
                process = self._spawner.spawn(command, partial(self._on_exit, run_id))
                self._runs[run_id] = RunRecord(run_id, suite, process, clock=self._clock)
                record = None

        if record is not None:
            report = record.snapshot()
            logger.warning("Run %s for suite '%s' not launched: %s", run_id, suite, report.error)
            self._evict_finished(run_id)
            if self._tracking is not None:
                _report_tracking_best_effort(self._tracking, report)
            return run_id

        logger.info(
            "Started run %s for suite '%s' (pid=%s): %s",
            run_id,
            suite,
            process.pid,
            " ".join(command.argv()),
        )
        return run_id

    def get_status(self, run_id: str) -> RunStatusReport:
        return self._get(run_id).snapshot()

    def cancel(self, run_id: str) -> None:
        record = self._get(run_id)
        if not record.request_cancel():
            logger.debug("Cancel ignored for finished run %s", run_id)
            return
        logger.info("Cancelling run %s (suite '%s')", run_id, record.suite)
        record.process.kill()

    def list_runs(self) -> list[RunStatusReport]:
        with self._lock:
            records = list(self._runs.values())
        return [record.snapshot() for record in records]

    def shutdown(self) -> None:
        """Request cancellation of every active run."""
        with self._lock:
            records = list(self._runs.values())
        for record in records:
            if record.request_cancel():
                record.process.kill()

    def _get(self, run_id: str) -> RunRecord:
        with self._lock:
            record = self._runs.get(run_id)
        if record is None:
            raise NotFoundError(run_id)
        return record

    def _failed_before_launch(self, run_id: str, suite: str, exc: Exception) -> RunRecord:
        error = SpawnError(f"Failed to build command for suite '{suite}': {exc}")
        error.__cause__ = exc
        record = RunRecord(run_id, suite, SubprocessHandle(None), clock=self._clock)
        record.finalize(Failed(error))
        return record

    def _on_exit(self, run_id: str, error: RunError | None, stdout: str, stderr: str) -> None:
        with self._lock:
            record = self._runs[run_id]

        outcome = self._settle(record.suite, error, stdout, stderr)
        if not record.finalize(outcome):
            logger.warning("Duplicate exit notification for run %s ignored", run_id)
            return
        self._evict_finished(run_id)

        report = record.snapshot()
        if report.error is not None:
            logger.info(
                "Run %s (suite '%s') %s after %d ms: %s",
                run_id,
                report.suite,
                report.status,
                report.runtime_ms,
                report.error,
            )
        else:
            logger.info(
                "Run %s (suite '%s') %s after %d ms",
                run_id,
                report.suite,
                report.status,
                report.runtime_ms,
            )
        if self._tracking is not None:
            _report_tracking_best_effort(self._tracking, report)

    def _settle(
        self, suite: str, error: RunError | None, stdout: str, stderr: str
    ) -> Completed | Failed:
        if error is not None:
            return Failed(error)
        if not stdout and stderr:
            return Failed(OutputError(stderr))
        try:
            result = self._catalog.decode_result(suite, stdout)
        except Exception as exc:
            decode_error = DecodeError(f"Failed to decode output of suite '{suite}': {exc}")
            decode_error.__cause__ = exc
            return Failed(decode_error)
        return Completed(result)

    def _evict_finished(self, run_id: str) -> None:
        if self._retain_finished is None:
            return
        with self._lock:
            self._finished_order.append(run_id)
            while len(self._finished_order) > self._retain_finished:
                evicted = self._finished_order.popleft()
                self._runs.pop(evicted, None)
                logger.debug("Evicted finished run %s", evicted)


def _report_tracking_best_effort(tracking: TrackingClient, report: RunStatusReport) -> None:
    try:
        tracking_run_id = tracking.start_run(
            run_name=f"{report.suite}#{report.run_id}",
            tags={"suite": report.suite, "dispatch_run_id": report.run_id},
        )
        tracking.log_param(tracking_run_id, "suite", report.suite)
        metrics = _numeric_metrics(report.result)
        metrics["runtime_ms"] = float(report.runtime_ms)
        tracking.log_metrics(tracking_run_id, metrics)
        if report.error is not None:
            tracking.set_tags(tracking_run_id, {"error": str(report.error)[:500]})
        tracking.end_run(tracking_run_id, status=report.status)
    except Exception:
        logging.getLogger("suite_dispatch.tracking").warning(
            "Failed to report run %s to tracking",
            report.run_id,
            exc_info=True,
        )


def _numeric_metrics(result: object) -> dict[str, float]:
    if not isinstance(result, Mapping):
        return {}
    metrics: dict[str, float] = {}
    for key, value in result.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if math.isfinite(value):
            metrics[str(key)] = float(value)
    return metrics
