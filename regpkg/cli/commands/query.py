"""Registry query commands: list, show."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.registry import PackageRegistry


def cmd_list(args, registry: 'PackageRegistry') -> int:
    """Handle list command - list registered packages."""
    from .. import display

    rows = [(pkg, registry.is_automatic(pkg)) for pkg in registry.list_packages()]
    if args.auto:
        rows = [row for row in rows if row[1]]
    elif args.manual:
        rows = [row for row in rows if not row[1]]

    packages = [pkg for pkg, _ in rows]
    summaries = [display.record_summary(pkg, automatic) for pkg, automatic in rows]
    display.print_packages(packages, summaries)
    return 0


def cmd_show(args, registry: 'PackageRegistry') -> int:
    """Handle show command - display a registered package."""
    from .. import colors, display

    pkg = registry.find_package(args.package)
    if pkg is None:
        print(colors.error(f"Package '{args.package}' is not registered"))
        return 1

    info = display.record_summary(pkg, registry.is_automatic(pkg))

    if display.get_mode() == display.DisplayMode.JSON:
        display.print_json(info)
        return 0

    print(f"{colors.bold('Name:')}         {info['pkgname']}")
    print(f"{colors.bold('Version:')}      {info['version'] or ''}")
    print(f"{colors.bold('State:')}        {info['state'] or ''}")
    print(f"{colors.bold('Automatic:')}    {'yes' if info['automatic'] else 'no'}")
    if info['requiredby']:
        print(f"{colors.bold('Required by:')}  {', '.join(info['requiredby'])}")
    else:
        print(f"{colors.bold('Required by:')}  {colors.dim('(none)')}")
    return 0
