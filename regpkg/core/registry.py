"""
Registered packages database for regpkg

The registry is a property list whose root dictionary holds a "packages"
array, one dictionary per installed package, in registration order:

    <dict>
      <key>packages</key>
      <array>
        <dict>
          <key>pkgname</key>           <string>glib</string>
          <key>version</key>           <string>2.26.1_1</string>
          <key>state</key>             <string>installed</string>
          <key>automatic-install</key> <true/>
          <key>requiredby</key>
          <array><string>gtk+-2.22.1_1</string></array>
        </dict>
        ...
      </array>
    </dict>

The file is loaded once and shared by every outstanding snapshot; it is
dropped when the last snapshot is released.
"""

import logging
import plistlib
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union
from xml.parsers.expat import ExpatError

from .compression import read_file
from .config import get_regpkgdb_path
from .errors import MalformedRecord, RegistryUnavailable

logger = logging.getLogger(__name__)


def check_record(pkg) -> Dict:
    """Return pkg if it is a package dictionary, raise MalformedRecord otherwise."""
    if not isinstance(pkg, dict):
        raise MalformedRecord(f"package entry is not a dictionary: {pkg!r}")
    return pkg


class PkgState(Enum):
    """Installation state of a registered package."""
    INSTALLED = "installed"
    UNPACKED = "unpacked"
    BROKEN = "broken"
    CONFIG_FILES = "config-files"
    NOT_INSTALLED = "not-installed"


class RegistrySnapshot:
    """Read-only, ordered view of the registered packages.

    Obtained from PackageRegistry.acquire_snapshot() and handed back with
    PackageRegistry.release_snapshot() exactly once.
    """

    def __init__(self, registry: 'PackageRegistry', packages: Tuple[Dict, ...]):
        self.registry = registry
        self.packages = packages
        self.released = False

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self) -> Iterator[Dict]:
        return iter(self.packages)

    def __reversed__(self) -> Iterator[Dict]:
        return reversed(self.packages)


class PackageRegistry:
    """Access to the registered packages database file."""

    def __init__(self, path: Union[str, Path, None] = None,
                 rootdir: Union[str, Path, None] = None):
        """Create a registry handle.

        Args:
            path: Registry file (default: derived from config and rootdir)
            rootdir: Root directory of the target system (default: /)
        """
        self.path = Path(path) if path else get_regpkgdb_path(rootdir)
        self._packages: Optional[Tuple[Dict, ...]] = None
        self._refcount = 0

    def _load(self) -> Tuple[Dict, ...]:
        """Read and parse the registry file."""
        try:
            data = read_file(self.path)
        except FileNotFoundError:
            raise RegistryUnavailable(self.path, "no such file")
        except (OSError, ValueError, ImportError) as e:
            raise RegistryUnavailable(self.path, str(e))

        try:
            root = plistlib.loads(data)
        except (ValueError, ExpatError, AttributeError, TypeError, OverflowError) as e:
            # plistlib raises AttributeError on a bad <date>
            raise RegistryUnavailable(self.path, f"invalid property list: {e}")

        if not isinstance(root, dict):
            raise RegistryUnavailable(self.path, "root object is not a dictionary")
        packages = root.get('packages')
        if not isinstance(packages, list):
            raise RegistryUnavailable(self.path, "missing 'packages' array")

        return tuple(packages)

    def acquire_snapshot(self) -> RegistrySnapshot:
        """Obtain a read-only view of the registered packages.

        Raises:
            RegistryUnavailable: If the registry file cannot be read
        """
        if self._packages is None:
            self._packages = self._load()
            logger.debug(f"Loaded {len(self._packages)} packages from {self.path}")
        self._refcount += 1
        return RegistrySnapshot(self, self._packages)

    def release_snapshot(self, snapshot: RegistrySnapshot):
        """Hand back a snapshot obtained from acquire_snapshot()."""
        if snapshot.registry is not self:
            raise ValueError("Snapshot does not belong to this registry")
        if snapshot.released:
            raise ValueError("Snapshot already released")

        snapshot.released = True
        self._refcount -= 1
        if self._refcount == 0:
            self._packages = None
            logger.debug(f"Released registry {self.path}")

    @contextmanager
    def snapshot(self) -> Iterator[RegistrySnapshot]:
        """Context manager pairing acquire_snapshot() and release_snapshot()."""
        snap = self.acquire_snapshot()
        try:
            yield snap
        finally:
            self.release_snapshot(snap)

    @property
    def active_snapshots(self) -> int:
        """Number of snapshots acquired and not yet released."""
        return self._refcount

    def is_automatic(self, pkg: Dict) -> bool:
        """Tell whether a package was installed as a dependency.

        Raises:
            MalformedRecord: If automatic-install is present but not a boolean
        """
        automatic = pkg.get('automatic-install', False)
        if not isinstance(automatic, bool):
            raise MalformedRecord(
                f"automatic-install is a {type(automatic).__name__}, not a boolean",
                pkg.get('pkgname'))
        return automatic

    def get_state(self, pkg: Dict) -> PkgState:
        """Resolve the installation state of a package record.

        Raises:
            MalformedRecord: If the state is missing or unknown
        """
        name = pkg.get('pkgname')
        state = pkg.get('state')
        if state is None:
            raise MalformedRecord("missing state", name)
        try:
            return PkgState(state)
        except ValueError:
            raise MalformedRecord(f"unknown state '{state}'", name)

    def find_package(self, name: str) -> Optional[Dict]:
        """Find a registered package by name.

        Returns:
            A copy of the package record, or None if not registered
        """
        with self.snapshot() as snap:
            for pkg in snap:
                if check_record(pkg).get('pkgname') == name:
                    return dict(pkg)
        return None

    def list_packages(self) -> List[Dict]:
        """Return copies of all registered packages, in registration order."""
        with self.snapshot() as snap:
            return [dict(check_record(pkg)) for pkg in snap]
