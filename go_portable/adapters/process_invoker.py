from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from go_portable.domain.errors import InvocationTimeout, LaunchFailure
from go_portable.domain.models import InvocationResult

logger = logging.getLogger(__name__)


@dataclass
class ProcessInvoker:
    """
    Adapter around subprocess: runs one external command and captures what
    the callers need. Stdout goes to the null device unless asked for, so a
    chatty child can never block on a full pipe.
    """
    timeout_seconds: Optional[float] = None

    def _environment(self, env_overlay: Mapping[str, str]) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(env_overlay)
        return env

    def run(
        self,
        command: str,
        args: List[str],
        env_overlay: Optional[Mapping[str, str]] = None,
        *,
        capture_stdout: bool = False,
    ) -> InvocationResult:
        env_overlay = env_overlay or {}
        cmd = [command, *args]
        logger.debug("Running command: %r env=%r", cmd, dict(env_overlay))

        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                env=self._environment(env_overlay),
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise InvocationTimeout(command, self.timeout_seconds) from e
        except OSError as e:
            raise LaunchFailure(command, e) from e

        logger.debug("%s exited with status %d", command, proc.returncode)
        return InvocationResult(
            returncode=proc.returncode,
            stderr=proc.stderr or b"",
            stdout=proc.stdout or b"",
        )

    def output(
        self,
        command: str,
        args: List[str],
        env_overlay: Optional[Mapping[str, str]] = None,
    ) -> InvocationResult:
        return self.run(command, args, env_overlay, capture_stdout=True)
