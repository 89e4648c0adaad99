"""CLI command modules."""

from .orphans import cmd_orphans
from .query import cmd_list, cmd_show

__all__ = [
    'cmd_orphans',
    'cmd_list',
    'cmd_show',
]
