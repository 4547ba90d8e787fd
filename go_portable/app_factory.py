from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from go_portable.adapters.process_invoker import ProcessInvoker
from go_portable.config.ini_config import AppSettings, ToolConfig
from go_portable.domain.models import Mode, Report
from go_portable.repositories.platform_enumerator import PlatformEnumerator
from go_portable.services.outcome_classifier import OutcomeClassifier
from go_portable.services.run_orchestrator import DiagnosticSink, RunOrchestrator
from go_portable.services.target_verifier import TargetVerifier


@dataclass
class PortabilityApp:
    tool: ToolConfig
    enumerator: PlatformEnumerator
    orchestrator: RunOrchestrator

    def run(
        self,
        mode: Mode,
        patterns: Sequence[str],
        *,
        first_class: bool = False,
        on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> Report:
        # Enumerate before verifying anything, so a broken toolchain is
        # reported before the first target runs.
        platforms = self.enumerator.list_platforms(first_class)
        return self.orchestrator.run(platforms, mode, patterns, on_diagnostic)


def create_app(settings: AppSettings, invoker: Optional[ProcessInvoker] = None) -> PortabilityApp:
    invoker = invoker or ProcessInvoker(timeout_seconds=settings.timeout_seconds)

    enumerator = PlatformEnumerator(tool=settings.tool, invoker=invoker)

    verifier = TargetVerifier(
        tool=settings.tool,
        invoker=invoker,
        classifier=OutcomeClassifier(no_buildable_files=settings.no_buildable_files),
    )

    orchestrator = RunOrchestrator(verifier=verifier, jobs=settings.jobs)

    return PortabilityApp(tool=settings.tool, enumerator=enumerator, orchestrator=orchestrator)
