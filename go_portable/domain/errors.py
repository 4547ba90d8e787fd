from __future__ import annotations

from typing import Optional

from go_portable.domain.models import EXIT_FATAL, Platform


def _exit_status_from(returncode: Optional[int]) -> int:
    # 0 and 1 are reserved for the report itself.
    if returncode is not None and returncode > 1:
        return returncode
    return EXIT_FATAL


def _stderr_excerpt(stderr: bytes, limit: int = 20) -> str:
    lines = stderr.decode("utf-8", errors="replace").rstrip().splitlines()
    return "\n".join(lines[:limit])


class PortabilityError(Exception):
    """Base class for errors that make the whole run unusable."""

    exit_status: int = EXIT_FATAL


class ConfigError(PortabilityError):
    pass


class LaunchFailure(PortabilityError):
    def __init__(self, command: str, cause: OSError):
        self.command = command
        self.cause = cause
        super().__init__(f"{command}: {cause.strerror or cause}")


class InvocationTimeout(PortabilityError):
    def __init__(self, command: str, timeout_seconds: float):
        self.command = command
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{command}: timed out after {timeout_seconds:g}s")


class AuthorityCommandFailed(PortabilityError):
    def __init__(self, command: str, returncode: int, stderr: bytes = b""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.exit_status = _exit_status_from(returncode)

        message = f"{command}: exit status {returncode}"
        excerpt = _stderr_excerpt(stderr)
        if excerpt:
            message += "\n" + excerpt
        super().__init__(message)


class MalformedAuthorityOutput(PortabilityError):
    def __init__(self, command: str, line: str):
        self.command = command
        self.line = line
        super().__init__(f"{command}: invalid output: {line!r}")


class UnclassifiedProcessFailure(PortabilityError):
    def __init__(
        self,
        command: str,
        returncode: Optional[int],
        stderr: bytes = b"",
        platform: Optional[Platform] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.platform = platform
        self.exit_status = _exit_status_from(returncode)

        where = f" ({platform})" if platform else ""
        message = f"{command}{where}: exit status {returncode}"
        excerpt = _stderr_excerpt(stderr)
        if excerpt:
            message += "\n" + excerpt
        super().__init__(message)
