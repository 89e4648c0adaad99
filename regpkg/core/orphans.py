"""Orphan package detection.

An orphan is a package that was installed automatically (as a dependency
of something else) and that no installed package requires anymore, either
directly or through other orphans.
"""

import copy
import logging
from typing import Dict, List, Optional

from .errors import MalformedRecord, OutOfMemory
from .pkgspec import parse_bare_name
from .registry import PackageRegistry, PkgState, check_record

logger = logging.getLogger(__name__)


class OrphanList:
    """Orphans found so far, in discovery order, indexed by name."""

    def __init__(self):
        self.packages: List[Dict] = []
        self._names = set()

    def __len__(self) -> int:
        return len(self.packages)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def add(self, pkg: Dict):
        """Append a deep copy of a package record."""
        try:
            self.packages.append(copy.deepcopy(pkg))
            self._names.add(pkg['pkgname'])
        except MemoryError as e:
            raise OutOfMemory(f"Cannot store orphan {pkg.get('pkgname')}") from e


def _is_orphan(registry: PackageRegistry, pkg: Dict, orphans: OrphanList) -> bool:
    """Apply the orphan rule to one package record.

    Args:
        registry: Registry used to resolve the package state
        pkg: Package record
        orphans: Orphans discovered earlier in the same pass

    Returns:
        True if pkg is an orphan
    """
    name = check_record(pkg).get('pkgname')

    if not registry.is_automatic(pkg):
        return False

    if registry.get_state(pkg) != PkgState.INSTALLED:
        return False

    if not isinstance(name, str) or not name:
        raise MalformedRecord("missing pkgname")

    reqby = pkg.get('requiredby')
    if reqby is None:
        return True
    if not isinstance(reqby, list):
        raise MalformedRecord(f"requiredby is a {type(reqby).__name__}, not an array", name)
    if not reqby:
        return True

    # Every dependent must already be an orphan
    ndep = 0
    for depspec in reqby:
        try:
            depname = parse_bare_name(depspec)
        except MalformedRecord as e:
            raise MalformedRecord(e.reason, name) from e
        if depname in orphans:
            ndep += 1

    if ndep != len(reqby):
        logger.debug(f"{name}: still required by {len(reqby) - ndep} of {len(reqby)} package(s)")
        return False
    return True


def find_orphan_packages(registry: Optional[PackageRegistry] = None) -> List[Dict]:
    """Find installed package orphans.

    Walks the registered packages in reverse registration order. Packages
    are normally registered after their dependencies, so by the time a
    dependency is examined its dependents have already been classified.
    A package whose every dependent is an orphan becomes an orphan too.

    This is a single pass: if a package is registered before one of its
    dependents, an orphan found later in the walk does not free packages
    that were already examined.

    Args:
        registry: Registry to inspect (default: registry at the configured path)

    Returns:
        Copies of the orphan package records, in discovery order

    Raises:
        RegistryUnavailable: If the registry cannot be read
        MalformedRecord: If a package record has an unexpected shape
        OutOfMemory: If the result cannot be built
    """
    if registry is None:
        registry = PackageRegistry()

    with registry.snapshot() as snap:
        orphans = OrphanList()
        for pkg in reversed(snap):
            if _is_orphan(registry, pkg, orphans):
                logger.debug(f"Found orphan: {pkg['pkgname']}")
                orphans.add(pkg)

    logger.info(f"Found {len(orphans)} orphan(s) among {len(snap)} registered package(s)")
    return orphans.packages
