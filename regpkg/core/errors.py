"""Error types raised while reading the package registry.

All of them derive from RegistryError so callers can catch the whole
family at once. None of them is retried inside regpkg.
"""

from pathlib import Path
from typing import Optional, Union


class RegistryError(Exception):
    """Base class for registry errors."""
    pass


class RegistryUnavailable(RegistryError):
    """Raised when no snapshot of the registry can be obtained."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Package registry unavailable: {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class MalformedRecord(RegistryError):
    """Raised when a package record does not have the expected shape."""

    def __init__(self, reason: str, pkgname: Optional[str] = None):
        self.reason = reason
        self.pkgname = pkgname
        if pkgname:
            super().__init__(f"Malformed record for {pkgname}: {reason}")
        else:
            super().__init__(f"Malformed record: {reason}")


class OutOfMemory(RegistryError, MemoryError):
    """Raised when copying a record or growing a result fails for lack of memory."""
    pass
