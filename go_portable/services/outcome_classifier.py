from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from go_portable.domain.errors import UnclassifiedProcessFailure
from go_portable.domain.models import (
    Clean,
    Diagnostic,
    Fatal,
    InvocationResult,
    NoBuildableFilesPolicy,
    Outcome,
    Platform,
)

# go vet / go build print "# <import path>" before per-package diagnostics.
PACKAGE_HEADER_PREFIX = b"#"
# "package foo: build constraints exclude all Go files in ..."
NO_BUILDABLE_FILES_PREFIX = b"package"


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[InvocationResult], bool]
    decide: Callable[["OutcomeClassifier", InvocationResult, str, Optional[Platform]], Outcome]


def _unclassified(result: InvocationResult, command: str, platform: Optional[Platform]) -> Fatal:
    return Fatal(UnclassifiedProcessFailure(command, result.returncode, result.stderr, platform))


def _no_buildable_files(
    classifier: "OutcomeClassifier",
    result: InvocationResult,
    command: str,
    platform: Optional[Platform],
) -> Outcome:
    policy = classifier.no_buildable_files
    if policy is NoBuildableFilesPolicy.IGNORE:
        return Clean()
    if policy is NoBuildableFilesPolicy.ABORT:
        return _unclassified(result, command, platform)
    return Diagnostic(result.stderr)


# Order matters: first match wins.
RULES: Tuple[Rule, ...] = (
    Rule(
        "launch_failure",
        lambda r: r.error is not None,
        lambda c, r, cmd, p: Fatal(r.error),
    ),
    Rule(
        "success",
        lambda r: r.returncode == 0,
        lambda c, r, cmd, p: Clean(),
    ),
    Rule(
        "silent_failure",
        lambda r: not r.stderr,
        lambda c, r, cmd, p: _unclassified(r, cmd, p),
    ),
    Rule(
        "package_diagnostic",
        lambda r: r.stderr.startswith(PACKAGE_HEADER_PREFIX),
        lambda c, r, cmd, p: Diagnostic(r.stderr),
    ),
    Rule(
        "no_buildable_files",
        lambda r: r.stderr.startswith(NO_BUILDABLE_FILES_PREFIX),
        _no_buildable_files,
    ),
    Rule(
        "unclassified",
        lambda r: True,
        lambda c, r, cmd, p: _unclassified(r, cmd, p),
    ),
)


@dataclass(frozen=True)
class OutcomeClassifier:
    """
    Turns one invocation into Clean, Diagnostic or Fatal.

    The tool has no structured error contract, so this works on the exit
    status and a prefix of stderr only. The last rule matches everything,
    which keeps the function total: an unexpected failure shape aborts the
    run instead of being reported as a problem with the platform.
    """
    no_buildable_files: NoBuildableFilesPolicy = NoBuildableFilesPolicy.REPORT

    def matching_rule(self, result: InvocationResult) -> Rule:
        return next(rule for rule in RULES if rule.matches(result))

    def classify(
        self,
        result: InvocationResult,
        command: str = "",
        platform: Optional[Platform] = None,
    ) -> Outcome:
        rule = self.matching_rule(result)
        return rule.decide(self, result, command, platform)
