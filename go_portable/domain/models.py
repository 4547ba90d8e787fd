from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

EXIT_CLEAN = 0
EXIT_DIAGNOSTICS = 1
EXIT_FATAL = 2


@dataclass(frozen=True)
class Platform:
    os: str
    arch: str

    @classmethod
    def parse(cls, text: str) -> Optional["Platform"]:
        """Returns None unless text is exactly two non-empty `/` fields without whitespace."""
        fields = text.split("/")
        if len(fields) != 2 or not all(f and not any(c.isspace() for c in f) for f in fields):
            return None
        return cls(os=fields[0], arch=fields[1])

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


class Mode(str, Enum):
    ANALYZE = "analyze"     # go vet
    COMPILE = "compile"     # go build -o /dev/null

    @property
    def subcommand(self) -> str:
        return "vet" if self is Mode.ANALYZE else "build"


class NoBuildableFilesPolicy(str, Enum):
    """
    What to do when the tool reports that no source files match the
    target's build constraints ("package ...: build constraints exclude
    all Go files"). The message can mean the platform is deliberately
    excluded or that a port is missing, so the choice is left to the user.
    """
    REPORT = "report"
    IGNORE = "ignore"
    ABORT = "abort"


@dataclass(frozen=True)
class InvocationResult:
    returncode: Optional[int]
    stderr: bytes = b""
    stdout: bytes = b""     # only captured for the authority command
    # Set when the process could not be observed to exit normally.
    error: Optional[Exception] = None

    @classmethod
    def from_error(cls, error: Exception) -> "InvocationResult":
        return cls(returncode=None, stderr=b"", error=error)


@dataclass(frozen=True)
class Clean:
    pass


@dataclass(frozen=True)
class Diagnostic:
    message: bytes


@dataclass(frozen=True)
class Fatal:
    error: Exception


Outcome = Union[Clean, Diagnostic, Fatal]


@dataclass(frozen=True)
class ReportEntry:
    platform: Platform
    message: bytes


@dataclass
class Report:
    entries: List[ReportEntry] = field(default_factory=list)

    def add(self, platform: Platform, message: bytes) -> ReportEntry:
        entry = ReportEntry(platform=platform, message=message)
        self.entries.append(entry)
        return entry

    def pairs(self) -> List[Tuple[Platform, bytes]]:
        return [(e.platform, e.message) for e in self.entries]

    @property
    def exit_status(self) -> int:
        return EXIT_DIAGNOSTICS if self.entries else EXIT_CLEAN

    def __len__(self) -> int:
        return len(self.entries)
