"""Shared fixtures for regpkg tests"""

import plistlib

import pytest

from regpkg.core import config
from regpkg.core.registry import PackageRegistry


def _compress(data: bytes, fmt: str) -> bytes:
    if fmt == 'zstd':
        import zstandard
        return zstandard.ZstdCompressor().compress(data)
    elif fmt == 'gzip':
        import gzip
        return gzip.compress(data)
    elif fmt == 'xz':
        import lzma
        return lzma.compress(data)
    elif fmt == 'bzip2':
        import bz2
        return bz2.compress(data)
    return data


@pytest.fixture
def write_registry(tmp_path):
    """Return a function writing a registry file and opening it.

    The function takes the package records (registration order) and an
    optional compression format, and returns a PackageRegistry.
    """
    def _write(packages, compression=None, name='regpkgdb.plist'):
        path = tmp_path / name
        data = plistlib.dumps({'packages': packages})
        path.write_bytes(_compress(data, compression))
        return PackageRegistry(path)

    return _write


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Each test starts with a fresh mode detection."""
    config.reset_cache()
    yield
    config.reset_cache()
