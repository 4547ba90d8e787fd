from .platform_enumerator import FIRST_CLASS_PORTS, PlatformEnumerator

__all__ = [
    "FIRST_CLASS_PORTS",
    "PlatformEnumerator",
]
