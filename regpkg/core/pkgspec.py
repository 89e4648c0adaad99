"""Package spec helpers.

A package spec is the compound ``name-version`` string used in
``requiredby`` back-references, e.g. ``libfoo-devel-1.2_3``. The name may
contain dashes itself, the version never does, so the last dash separates
the two.
"""

from typing import Tuple

from .errors import MalformedRecord


def split_pkgspec(pkgspec: str) -> Tuple[str, str]:
    """Split a package spec into name and version.

    Args:
        pkgspec: String like "glib-2.26.1_1"

    Returns:
        Tuple of (name, version)

    Raises:
        MalformedRecord: If the package spec is not a string or lacks either part
    """
    if not isinstance(pkgspec, str):
        raise MalformedRecord(f"package spec is not a string: {pkgspec!r}")

    name, sep, version = pkgspec.rpartition('-')
    if not sep or not name or not version:
        raise MalformedRecord(f"invalid package spec '{pkgspec}'")
    return name, version


def parse_bare_name(pkgspec: str) -> str:
    """Extract the package name from a package spec.

    Args:
        pkgspec: String like "lib64-foo-bar-1.2.3"

    Returns:
        The package name ("lib64-foo-bar")
    """
    return split_pkgspec(pkgspec)[0]


def parse_version(pkgspec: str) -> str:
    """Extract the version from a package spec."""
    return split_pkgspec(pkgspec)[1]


def make_pkgspec(pkg: dict) -> str:
    """Build the package spec of a registry record."""
    name = pkg.get('pkgname', '')
    version = pkg.get('version')
    if version:
        return f"{name}-{version}"
    return name
