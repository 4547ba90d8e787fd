from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from go_portable.domain.models import Diagnostic, Fatal, Mode, Outcome, Platform, Report, ReportEntry
from go_portable.services.target_verifier import TargetVerifier

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[ReportEntry], None]


@dataclass
class RunOrchestrator:
    """
    Service layer: verifies every platform of the matrix and collects the
    diagnostics, in matrix order, into a Report.

    A Fatal outcome stops the run: its error is raised and no platform after
    it in the matrix is launched. Diagnostics already handed to the sink
    stay handed. With jobs > 1 the result is the same as a sequential run.
    """
    verifier: TargetVerifier
    jobs: int = 1

    def run(
        self,
        platforms: Sequence[Platform],
        mode: Mode,
        patterns: Sequence[str],
        on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> Report:
        report = Report()
        if self.jobs > 1 and len(platforms) > 1:
            self._run_parallel(platforms, mode, patterns, report, on_diagnostic)
        else:
            for platform in platforms:
                outcome = self.verifier.verify(platform, mode, patterns)
                self._record(platform, outcome, report, on_diagnostic)

        logger.info("%d of %d platforms reported diagnostics", len(report), len(platforms))
        return report

    def _record(
        self,
        platform: Platform,
        outcome: Outcome,
        report: Report,
        on_diagnostic: Optional[DiagnosticSink],
    ) -> None:
        if isinstance(outcome, Fatal):
            raise outcome.error
        if isinstance(outcome, Diagnostic):
            entry = report.add(platform, outcome.message)
            if on_diagnostic is not None:
                on_diagnostic(entry)

    def _run_parallel(
        self,
        platforms: Sequence[Platform],
        mode: Mode,
        patterns: Sequence[str],
        report: Report,
        on_diagnostic: Optional[DiagnosticSink],
    ) -> None:
        lock = threading.Lock()
        # Lowest matrix index that came back Fatal so far.
        fatal_at = len(platforms)

        def mark_fatal(index: int) -> None:
            nonlocal fatal_at
            with lock:
                fatal_at = min(fatal_at, index)

        def verify(index: int, platform: Platform) -> Optional[Outcome]:
            # None marks a platform skipped because an earlier one was fatal.
            with lock:
                if index > fatal_at:
                    return None
            try:
                outcome = self.verifier.verify(platform, mode, patterns)
            except BaseException:
                mark_fatal(index)
                raise
            if isinstance(outcome, Fatal):
                mark_fatal(index)
            return outcome

        logger.debug("verifying %d platforms with %d workers", len(platforms), self.jobs)
        with ThreadPoolExecutor(max_workers=self.jobs) as pool:
            futures = [pool.submit(verify, i, p) for i, p in enumerate(platforms)]
            try:
                # One slot per matrix index, read back in order.
                for platform, future in zip(platforms, futures):
                    outcome = future.result()
                    if outcome is None:
                        continue
                    self._record(platform, outcome, report, on_diagnostic)
            finally:
                for future in futures:
                    future.cancel()
