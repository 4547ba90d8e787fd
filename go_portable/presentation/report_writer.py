from __future__ import annotations

import sys
from typing import BinaryIO, Optional

from go_portable.domain.models import ReportEntry


class ReportWriter:
    """
    Renders report entries on the error stream as they arrive:

        linux/amd64 using go
        # example.com/pkg
        ./foo.go:3:2: ...

    Entries are separated by a blank line. The tool's text is written
    unmodified.
    """

    def __init__(self, tool_name: str, stream: Optional[BinaryIO] = None):
        self.tool_name = tool_name
        self._stream = stream if stream is not None else sys.stderr.buffer
        self._written = 0

    @property
    def written(self) -> int:
        return self._written

    def write_entry(self, entry: ReportEntry) -> None:
        if self._written > 0:
            self._stream.write(b"\n")
        header = f"{entry.platform} using {self.tool_name}\n"
        self._stream.write(header.encode("utf-8"))
        self._stream.write(entry.message)
        self._stream.write(b"\n")
        self._stream.flush()
        self._written += 1

