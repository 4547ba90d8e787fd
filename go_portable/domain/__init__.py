from .errors import (
    AuthorityCommandFailed,
    ConfigError,
    InvocationTimeout,
    LaunchFailure,
    MalformedAuthorityOutput,
    PortabilityError,
    UnclassifiedProcessFailure,
)
from .models import (
    Clean,
    Diagnostic,
    Fatal,
    InvocationResult,
    Mode,
    NoBuildableFilesPolicy,
    Outcome,
    Platform,
    Report,
    ReportEntry,
)

__all__ = [
    "AuthorityCommandFailed",
    "ConfigError",
    "InvocationTimeout",
    "LaunchFailure",
    "MalformedAuthorityOutput",
    "PortabilityError",
    "UnclassifiedProcessFailure",
    "Clean",
    "Diagnostic",
    "Fatal",
    "InvocationResult",
    "Mode",
    "NoBuildableFilesPolicy",
    "Outcome",
    "Platform",
    "Report",
    "ReportEntry",
]
