"""
Registry location for regpkg.

The registry lives below a root directory (default /):
    PROD: <rootdir>/var/db/regpkg/regpkgdb.plist     (system installation)
    DEV:  <rootdir>/var/lib/regpkg-dev/regpkgdb.plist

Without an explicit mode, PROD is used when regpkg is installed in
/usr/bin, DEV otherwise. The answer is computed once per process.
"""

from pathlib import Path
from typing import Optional, Union

REGPKGDB_NAME = "regpkgdb.plist"

PROD_BASE_DIR = Path("var/db/regpkg")
DEV_BASE_DIR = Path("var/lib/regpkg-dev")

SYSTEM_EXECUTABLE = Path("/usr/bin/regpkg")

_dev_mode: Optional[bool] = None


def _is_system_install() -> bool:
    return SYSTEM_EXECUTABLE.exists()


def reset_cache():
    """Forget the detected mode (next call detects again)."""
    global _dev_mode
    _dev_mode = None


def is_dev_mode() -> bool:
    """True unless regpkg is installed system-wide."""
    global _dev_mode
    if _dev_mode is None:
        _dev_mode = not _is_system_install()
    return _dev_mode


def get_regpkgdb_path(rootdir: Union[str, Path, None] = None, dev_mode: bool = None) -> Path:
    """Get the registered packages database path.

    Args:
        rootdir: Root directory of the target system (default: /)
        dev_mode: Force DEV mode if True, PROD if False, auto-detect if None
    """
    if dev_mode is None:
        dev_mode = is_dev_mode()
    base_dir = DEV_BASE_DIR if dev_mode else PROD_BASE_DIR
    return Path(rootdir or "/") / base_dir / REGPKGDB_NAME
