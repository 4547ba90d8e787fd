from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from go_portable.adapters.process_invoker import ProcessInvoker
from go_portable.config.ini_config import ToolConfig
from go_portable.domain.errors import InvocationTimeout, LaunchFailure
from go_portable.domain.models import InvocationResult, Mode, Outcome, Platform
from go_portable.services.outcome_classifier import OutcomeClassifier

logger = logging.getLogger(__name__)


def build_args(mode: Mode, patterns: Sequence[str]) -> List[str]:
    args = [mode.subcommand]
    if mode is Mode.COMPILE:
        args += ["-o", os.devnull]
    return args + list(patterns)


def build_env(platform: Platform, mode: Mode) -> Dict[str, str]:
    env = {"GOOS": platform.os, "GOARCH": platform.arch}
    if mode is Mode.COMPILE:
        env["CGO_ENABLED"] = "0"
    return env


@dataclass
class TargetVerifier:
    """
    Runs the tool for one platform. Holds no per-call state, so the
    orchestrator may call it from several threads at once.
    """
    tool: ToolConfig
    invoker: ProcessInvoker
    classifier: OutcomeClassifier = field(default_factory=OutcomeClassifier)

    def verify(self, platform: Platform, mode: Mode, patterns: Sequence[str]) -> Outcome:
        args = build_args(mode, patterns)
        label = f"{self.tool.name} {mode.subcommand}"
        logger.info("verifying %s (%s)", platform, label)

        try:
            result = self.invoker.run(self.tool.path, args, build_env(platform, mode))
        except (LaunchFailure, InvocationTimeout) as e:
            result = InvocationResult.from_error(e)

        return self.classifier.classify(result, label, platform)
