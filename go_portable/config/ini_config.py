import os
import shutil
from configparser import ConfigParser, Error as ConfigParserError
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from go_portable.domain.errors import ConfigError
from go_portable.domain.models import NoBuildableFilesPolicy

INI_DEFAULT_NAME = "go-portable.ini"
INI_ENV_VAR = "GO_PORTABLE_INI"
TOOL_ENV_VAR = "GOCMD"
DEFAULT_TOOL = "go"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ToolConfig:
    path: str   # what gets executed
    name: str   # base name, used in messages and report headers

    @staticmethod
    def resolve(command: str) -> "ToolConfig":
        """
        Looks the command up on PATH. A failed lookup is not an error here:
        it surfaces as a LaunchFailure the first time the tool is invoked.
        """
        path = shutil.which(command) or command
        return ToolConfig(path=path, name=Path(command).name)


@dataclass(frozen=True)
class AppSettings:
    tool: ToolConfig
    jobs: int
    timeout_seconds: Optional[float]
    no_buildable_files: NoBuildableFilesPolicy
    log_level: str


class IniConfig:
    """
    Adapter around ConfigParser and environment overrides.
    Keeps INI handling out of the services.
    """

    def __init__(self, ini_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        self._ini_path = ini_path
        self._environ = os.environ if environ is None else environ
        self._cfg = ConfigParser(interpolation=None)
        if ini_path is None:
            return
        try:
            read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        except (ConfigParserError, UnicodeDecodeError) as e:
            raise ConfigError(f"{ini_path}: {e}") from e
        if not read_ok:
            raise ConfigError(f"INI file not found or unreadable: {ini_path}")

    @property
    def ini_path(self) -> Optional[Path]:
        return self._ini_path

    @staticmethod
    def from_env_or_default(environ: Optional[Mapping[str, str]] = None) -> "IniConfig":
        environ = os.environ if environ is None else environ
        ini_raw = (environ.get(INI_ENV_VAR) or "").strip()
        if ini_raw:
            return IniConfig(Path(os.path.expanduser(ini_raw)), environ)

        # The default file is optional.
        default = Path.cwd() / INI_DEFAULT_NAME
        return IniConfig(default if default.is_file() else None, environ)

    def _get(self, section: str, key: str) -> str:
        try:
            raw = self._cfg.get(section, key, fallback="")
        except ConfigParserError as e:
            raise ConfigError(f"[{section}] {key}: {e}") from e
        return (raw or "").strip()

    def _getint(self, section: str, key: str, fallback: int) -> int:
        raw = self._get(section, key)
        if not raw:
            return fallback
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigError(f"[{section}] {key}: not an integer: {raw!r}") from e

    def _getfloat(self, section: str, key: str) -> Optional[float]:
        raw = self._get(section, key)
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError as e:
            raise ConfigError(f"[{section}] {key}: not a number: {raw!r}") from e

    def load_settings(self) -> AppSettings:
        # GOCMD wins over the INI file
        command = (self._environ.get(TOOL_ENV_VAR) or "").strip() or self._get("tool", "command") or DEFAULT_TOOL

        jobs = self._getint("execution", "jobs", fallback=1)
        timeout_seconds = self._getfloat("execution", "timeout_seconds")

        policy_raw = self._get("classification", "no_buildable_files").lower() or NoBuildableFilesPolicy.REPORT.value
        log_level = self._get("logging", "level").upper() or "WARNING"

        # Validate
        if jobs < 1:
            raise ConfigError(f"[execution] jobs must be at least 1, got {jobs}")
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ConfigError(f"[execution] timeout_seconds must be positive, got {timeout_seconds:g}")
        try:
            policy = NoBuildableFilesPolicy(policy_raw)
        except ValueError as e:
            choices = ", ".join(p.value for p in NoBuildableFilesPolicy)
            raise ConfigError(f"[classification] no_buildable_files must be one of {choices}, got {policy_raw!r}") from e
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"[logging] level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        return AppSettings(
            tool=ToolConfig.resolve(command),
            jobs=jobs,
            timeout_seconds=timeout_seconds,
            no_buildable_files=policy,
            log_level=log_level,
        )
