"""Color output support for regpkg CLI.

Red for errors, orange for orphaned packages, green when nothing is
orphaned.
"""

import os
import sys

_COLORS = {
    'reset': '\033[0m',
    'bold': '\033[1m',
    'dim': '\033[2m',
    'red': '\033[91m',
    'green': '\033[92m',
    'orange': '\033[93m',   # Bright yellow, ANSI has no orange
}

_colors_enabled = True


def init(nocolor: bool = False):
    """Enable colors unless disabled by flag, NO_COLOR or a non-tty stdout."""
    global _colors_enabled
    _colors_enabled = not (nocolor or os.environ.get('NO_COLOR') or not sys.stdout.isatty())


def _wrap(text: str, color: str) -> str:
    if not _colors_enabled:
        return text
    return f"{_COLORS[color]}{text}{_COLORS['reset']}"


def error(text: str) -> str:
    return _wrap(text, 'red')


def success(text: str) -> str:
    return _wrap(text, 'green')


def pkg_orphan(name: str) -> str:
    return _wrap(name, 'orange')


def dim(text: str) -> str:
    return _wrap(text, 'dim')


def bold(text: str) -> str:
    return _wrap(text, 'bold')


def count(n: int) -> str:
    return bold(str(n))
