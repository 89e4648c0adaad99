"""Orphan listing command."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.registry import PackageRegistry


def cmd_orphans(args, registry: 'PackageRegistry') -> int:
    """Handle orphans command - list orphaned packages."""
    from .. import colors, display
    from ...core.orphans import find_orphan_packages

    orphans = find_orphan_packages(registry)

    if display.get_mode() == display.DisplayMode.COLUMNS and not args.quiet:
        if not orphans:
            print(colors.success("No orphaned packages found"))
            return 0
        print(f"Found {colors.count(len(orphans))} orphaned package(s):")

    # Orphans are automatic installs by definition
    summaries = [display.record_summary(pkg, True) for pkg in orphans]
    display.print_packages(orphans, summaries, color_func=colors.pkg_orphan)
    return 0
