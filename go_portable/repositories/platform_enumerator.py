from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List

from go_portable.adapters.process_invoker import ProcessInvoker
from go_portable.config.ini_config import ToolConfig
from go_portable.domain.errors import AuthorityCommandFailed, MalformedAuthorityOutput
from go_portable.domain.models import Platform

logger = logging.getLogger(__name__)

AUTHORITY_ARGS = ["tool", "dist", "list"]

# https://github.com/golang/go/wiki/PortingPolicy#first-class-ports
FIRST_CLASS_PORTS: FrozenSet[str] = frozenset({
    "linux/amd64",
    "linux/386",
    "linux/arm",
    "linux/arm64",
    "darwin/amd64",
    "windows/amd64",
    "windows/386",
})


def parse_platforms(text: str, command: str) -> List[Platform]:
    platforms: List[Platform] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        platform = Platform.parse(line)
        if platform is None:
            raise MalformedAuthorityOutput(command, line)
        platforms.append(platform)
    return platforms


def first_class_only(platforms: List[Platform]) -> List[Platform]:
    return [p for p in platforms if str(p) in FIRST_CLASS_PORTS]


@dataclass
class PlatformEnumerator:
    """
    Repository pattern: the toolchain is the authority on which os/arch
    pairs exist; this asks it once and hands back the target matrix in the
    order it reported.
    """
    tool: ToolConfig
    invoker: ProcessInvoker

    @property
    def command_label(self) -> str:
        return " ".join([self.tool.name, *AUTHORITY_ARGS])

    def list_platforms(self, first_class: bool = False) -> List[Platform]:
        # LaunchFailure propagates as-is
        result = self.invoker.output(self.tool.path, list(AUTHORITY_ARGS))
        if result.returncode != 0:
            raise AuthorityCommandFailed(self.command_label, result.returncode, result.stderr)

        text = result.stdout.decode("utf-8", errors="replace")
        platforms = parse_platforms(text, self.command_label)
        logger.info("%s reported %d platforms", self.command_label, len(platforms))

        if first_class:
            platforms = first_class_only(platforms)
            logger.info("%d first class platforms selected", len(platforms))

        return platforms
