from .ini_config import AppSettings, IniConfig, ToolConfig

__all__ = [
    "AppSettings",
    "IniConfig",
    "ToolConfig",
]
