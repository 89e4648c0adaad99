"""Core modules for regpkg"""

from .errors import RegistryError, RegistryUnavailable, MalformedRecord, OutOfMemory
from .registry import PackageRegistry, PkgState
from .orphans import find_orphan_packages

__all__ = [
    'RegistryError',
    'RegistryUnavailable',
    'MalformedRecord',
    'OutOfMemory',
    'PackageRegistry',
    'PkgState',
    'find_orphan_packages',
]
