from __future__ import annotations

import errno

import pytest

from go_portable.domain.errors import LaunchFailure, UnclassifiedProcessFailure
from go_portable.domain.models import (
    Clean,
    Diagnostic,
    Fatal,
    InvocationResult,
    NoBuildableFilesPolicy,
    Platform,
)
from go_portable.services.outcome_classifier import RULES, OutcomeClassifier
from go_portable.tests.fakes import failed, ok

VET_OUTPUT = b"# example.com/pkg\n./foo.go:3:2: unreachable code\n"
EXCLUDED = b"package example.com/pkg: build constraints exclude all Go files in /src/pkg\n"


def test_rule_order():
    assert [r.name for r in RULES] == [
        "launch_failure",
        "success",
        "silent_failure",
        "package_diagnostic",
        "no_buildable_files",
        "unclassified",
    ]


@pytest.mark.parametrize(
    "result, rule",
    [
        (ok(), "success"),
        (ok(b"warning: something\n"), "success"),
        (ok(b"# pkg\nstill fine\n"), "success"),
        (failed(1), "silent_failure"),
        (failed(2, VET_OUTPUT), "package_diagnostic"),
        (failed(1, VET_OUTPUT), "package_diagnostic"),
        (failed(1, EXCLUDED), "no_buildable_files"),
        (failed(1, b"go: cannot find main module\n"), "unclassified"),
        (failed(2, b"panic: runtime error\n"), "unclassified"),
        (failed(1, b" # leading space\n"), "unclassified"),
    ],
)
def test_matching_rule(result, rule):
    assert OutcomeClassifier().matching_rule(result).name == rule


def test_exit_zero_is_clean_whatever_stderr_says():
    classifier = OutcomeClassifier()
    for stderr in (b"", b"# pkg\n", b"package x: nope\n", b"garbage"):
        assert classifier.classify(ok(stderr)) == Clean()


def test_package_header_is_a_diagnostic_with_full_stderr():
    outcome = OutcomeClassifier().classify(failed(2, VET_OUTPUT))

    assert outcome == Diagnostic(VET_OUTPUT)


def test_launch_failure_is_fatal():
    error = LaunchFailure("go", FileNotFoundError(errno.ENOENT, "No such file or directory"))

    outcome = OutcomeClassifier().classify(InvocationResult.from_error(error))

    assert isinstance(outcome, Fatal)
    assert outcome.error is error


def test_empty_stderr_is_fatal():
    platform = Platform("linux", "amd64")

    outcome = OutcomeClassifier().classify(failed(1), "go vet", platform)

    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.error, UnclassifiedProcessFailure)
    assert outcome.error.returncode == 1
    assert outcome.error.platform == platform
    assert "go vet (linux/amd64): exit status 1" in str(outcome.error)


def test_unknown_shape_is_fatal_and_keeps_child_status():
    outcome = OutcomeClassifier().classify(failed(3, b"go: internal error\n"), "go build")

    assert isinstance(outcome, Fatal)
    assert outcome.error.exit_status == 3
    assert "go: internal error" in str(outcome.error)


@pytest.mark.parametrize(
    "policy, expected",
    [
        (NoBuildableFilesPolicy.REPORT, Diagnostic(EXCLUDED)),
        (NoBuildableFilesPolicy.IGNORE, Clean()),
    ],
)
def test_no_buildable_files_policy(policy, expected):
    classifier = OutcomeClassifier(no_buildable_files=policy)

    assert classifier.classify(failed(1, EXCLUDED)) == expected


def test_no_buildable_files_policy_abort():
    classifier = OutcomeClassifier(no_buildable_files=NoBuildableFilesPolicy.ABORT)

    outcome = classifier.classify(failed(1, EXCLUDED))

    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.error, UnclassifiedProcessFailure)


def test_default_policy_reports():
    assert OutcomeClassifier().no_buildable_files is NoBuildableFilesPolicy.REPORT


@pytest.mark.parametrize(
    "result",
    [ok(), failed(2, VET_OUTPUT), failed(1, EXCLUDED), failed(1), failed(4, b"boom\n")],
)
def test_classification_is_repeatable(result):
    classifier = OutcomeClassifier()

    first = classifier.classify(result, "go vet")
    second = classifier.classify(result, "go vet")

    assert type(first) is type(second)
    if isinstance(first, Fatal):
        assert str(first.error) == str(second.error)
    else:
        assert first == second
