from __future__ import annotations

import errno

import pytest

from go_portable.domain.errors import AuthorityCommandFailed, LaunchFailure, MalformedAuthorityOutput
from go_portable.domain.models import Platform
from go_portable.repositories.platform_enumerator import FIRST_CLASS_PORTS, PlatformEnumerator
from go_portable.tests.fakes import FAKE_TOOL, FakeInvoker, authority

DIST_LIST = """\
aix/ppc64
darwin/amd64
darwin/arm64
linux/386
linux/amd64
linux/arm
linux/riscv64
windows/386
windows/amd64
"""


def make_enumerator(invoker: FakeInvoker) -> PlatformEnumerator:
    return PlatformEnumerator(tool=FAKE_TOOL, invoker=invoker)


def test_runs_tool_dist_list_and_captures_stdout():
    invoker = FakeInvoker(authority_result=authority("linux/amd64\n"))

    make_enumerator(invoker).list_platforms()

    assert len(invoker.calls) == 1
    call = invoker.calls[0]
    assert call.command == "/fake/bin/go"
    assert call.args == ["tool", "dist", "list"]
    assert call.capture_stdout


def test_parses_one_platform_per_line_in_authority_order():
    invoker = FakeInvoker(authority_result=authority(DIST_LIST))

    platforms = make_enumerator(invoker).list_platforms()

    assert [str(p) for p in platforms] == DIST_LIST.split()
    assert platforms[0] == Platform(os="aix", arch="ppc64")


def test_skips_empty_and_trailing_lines():
    invoker = FakeInvoker(authority_result=authority("linux/amd64\n\n  \ndarwin/arm64\n\n\n"))

    platforms = make_enumerator(invoker).list_platforms()

    assert platforms == [Platform("linux", "amd64"), Platform("darwin", "arm64")]


def test_handles_crlf_line_endings():
    invoker = FakeInvoker(authority_result=authority("linux/amd64\r\nwindows/386\r\n"))

    platforms = make_enumerator(invoker).list_platforms()

    assert [str(p) for p in platforms] == ["linux/amd64", "windows/386"]


@pytest.mark.parametrize(
    "line",
    [
        "linuxamd64",           # one field
        "linux/amd64/v3",       # three fields
        "/amd64",               # empty os
        "linux/",               # empty arch
        "/",
        "linux /amd64",         # whitespace inside a field
        "linux/ amd64",
        "linux\tx/amd64",
    ],
)
def test_malformed_line_is_fatal(line):
    invoker = FakeInvoker(authority_result=authority(f"linux/amd64\n{line}\ndarwin/arm64\n"))

    with pytest.raises(MalformedAuthorityOutput) as excinfo:
        make_enumerator(invoker).list_platforms()

    assert excinfo.value.line == line
    assert "go tool dist list" in str(excinfo.value)


def test_malformed_line_is_fatal_even_when_filtered_out():
    invoker = FakeInvoker(authority_result=authority("linux/amd64\nbogus\n"))

    with pytest.raises(MalformedAuthorityOutput):
        make_enumerator(invoker).list_platforms(first_class=True)


def test_first_class_filter_is_a_stable_subsequence():
    invoker = FakeInvoker(authority_result=authority(DIST_LIST))
    enumerator = make_enumerator(invoker)

    everything = enumerator.list_platforms()
    first_class = enumerator.list_platforms(first_class=True)

    assert first_class == [p for p in everything if str(p) in FIRST_CLASS_PORTS]
    assert [str(p) for p in first_class] == [
        "darwin/amd64",
        "linux/386",
        "linux/amd64",
        "linux/arm",
        "windows/386",
        "windows/amd64",
    ]


def test_first_class_table():
    assert FIRST_CLASS_PORTS == {
        "linux/amd64",
        "linux/386",
        "linux/arm",
        "linux/arm64",
        "darwin/amd64",
        "windows/amd64",
        "windows/386",
    }


def test_launch_failure_propagates():
    failure = LaunchFailure("/fake/bin/go", FileNotFoundError(errno.ENOENT, "No such file or directory"))
    invoker = FakeInvoker(authority_result=failure)

    with pytest.raises(LaunchFailure) as excinfo:
        make_enumerator(invoker).list_platforms()

    assert excinfo.value is failure
    assert "/fake/bin/go" in str(excinfo.value)


def test_non_zero_exit_is_fatal():
    invoker = FakeInvoker(authority_result=authority("", returncode=3, stderr=b"go: unknown subcommand\n"))

    with pytest.raises(AuthorityCommandFailed) as excinfo:
        make_enumerator(invoker).list_platforms()

    assert excinfo.value.returncode == 3
    assert excinfo.value.exit_status == 3
    assert "go: unknown subcommand" in str(excinfo.value)
