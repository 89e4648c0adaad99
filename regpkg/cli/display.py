"""Package record output for the regpkg CLI.

Records are shown by their ``name-version`` label in one of three modes:
- columns: labels laid out top to bottom, then left to right (default)
- flat: one label per line, for scripts
- json: a list of record summaries
"""

import json
import shutil
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..core.pkgspec import make_pkgspec


class DisplayMode(Enum):
    """Output display mode."""
    COLUMNS = "columns"
    FLAT = "flat"
    JSON = "json"


_display_mode = DisplayMode.COLUMNS


def init(mode: str = "columns"):
    """Select the display mode ("columns", "flat" or "json")."""
    global _display_mode
    _display_mode = DisplayMode(mode)


def get_mode() -> DisplayMode:
    return _display_mode


def record_summary(pkg: Dict, automatic: bool) -> Dict:
    """JSON-safe summary of a package record.

    Args:
        pkg: Package record
        automatic: Whether the package was installed as a dependency
    """
    reqby = pkg.get('requiredby')
    return {
        'pkgname': pkg.get('pkgname'),
        'version': pkg.get('version'),
        'state': pkg.get('state'),
        'automatic': automatic,
        'requiredby': list(reqby) if isinstance(reqby, list) else [],
    }


def format_columns(packages: List[Dict],
                   color_func: Optional[Callable[[str], str]] = None,
                   terminal_width: Optional[int] = None) -> List[str]:
    """Lay out package labels in columns, filled column by column.

    Args:
        packages: Package records
        color_func: Optional colorize function applied to each label
        terminal_width: Override terminal width (default: detected)

    Returns:
        Lines ready to print, indented by two spaces
    """
    labels = [make_pkgspec(pkg) for pkg in packages]
    if not labels:
        return []

    width = terminal_width or shutil.get_terminal_size().columns
    col_width = max(len(label) for label in labels) + 2
    num_cols = max(1, (width - 2) // col_width)
    num_rows = (len(labels) + num_cols - 1) // num_cols

    lines = []
    for row in range(num_rows):
        cells = []
        for label in labels[row::num_rows]:
            shown = color_func(label) if color_func else label
            # Pad on the raw label so escape codes do not shift columns
            cells.append(shown + " " * (col_width - len(label)))
        lines.append("  " + "".join(cells).rstrip())
    return lines


def print_packages(packages: List[Dict],
                   summaries: Optional[List[Dict]] = None,
                   color_func: Optional[Callable[[str], str]] = None):
    """Print package records in the current display mode.

    Args:
        packages: Package records
        summaries: JSON form of the records (json mode only)
        color_func: Optional colorize function (columns mode only)
    """
    if _display_mode == DisplayMode.JSON:
        print_json(summaries or [])
    elif _display_mode == DisplayMode.FLAT:
        for pkg in packages:
            print(make_pkgspec(pkg))
    else:
        for line in format_columns(packages, color_func=color_func):
            print(line)


def print_json(data):
    """Print data as JSON."""
    print(json.dumps(data, ensure_ascii=False, indent=2))
