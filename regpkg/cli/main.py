"""
Main CLI entry point for regpkg

Provides a read-only CLI with short aliases:
- regpkg orphans / regpkg o   (list orphaned packages)
- regpkg list / regpkg l      (list registered packages)
- regpkg show / regpkg sh     (show a registered package)
"""

import argparse
import sys

from .. import __version__
from ..core.config import get_regpkgdb_path
from ..core.errors import RegistryError
from ..core.registry import PackageRegistry
from .commands import cmd_list, cmd_orphans, cmd_show


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all commands and aliases."""

    parser = argparse.ArgumentParser(
        prog='regpkg',
        description='Registered packages database tools',
        epilog='Use "regpkg <command> --help" for command-specific help.'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'regpkg {__version__}'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Quiet output'
    )

    parser.add_argument(
        '--nocolor',
        action='store_true',
        help='Disable colored output'
    )

    parser.add_argument(
        '--rootdir', '-r',
        metavar='DIR',
        help='Root directory of the target system (default: /)'
    )

    parser.add_argument(
        '--regpkgdb',
        metavar='FILE',
        help='Registry file to read (overrides --rootdir)'
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '--dev',
        action='store_true',
        help='Force development paths'
    )
    mode_group.add_argument(
        '--prod',
        action='store_true',
        help='Force production paths'
    )

    # Parent parser for display options (inherited by subparsers)
    display_parent = argparse.ArgumentParser(add_help=False)
    display_parent.add_argument(
        '--json',
        action='store_true',
        help='JSON output for scripting'
    )
    display_parent.add_argument(
        '--flat',
        action='store_true',
        help='Flat output (one item per line, parsable)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        title='commands',
        metavar='<command>'
    )

    # =========================================================================
    # orphans / o
    # =========================================================================
    subparsers.add_parser(
        'orphans', aliases=['o', 'list-orphans'],
        help='List orphaned packages',
        parents=[display_parent]
    )

    # =========================================================================
    # list / l
    # =========================================================================
    list_parser = subparsers.add_parser(
        'list', aliases=['l'],
        help='List registered packages',
        parents=[display_parent]
    )
    list_filter = list_parser.add_mutually_exclusive_group()
    list_filter.add_argument(
        '--auto',
        action='store_true',
        help='Only packages installed as dependencies'
    )
    list_filter.add_argument(
        '--manual',
        action='store_true',
        help='Only packages installed explicitly'
    )

    # =========================================================================
    # show / sh / info
    # =========================================================================
    show_parser = subparsers.add_parser(
        'show', aliases=['sh', 'info'],
        help='Show a registered package',
        parents=[display_parent]
    )
    show_parser.add_argument(
        'package',
        help='Package name'
    )

    return parser


def open_registry(args) -> PackageRegistry:
    """Build the registry handle selected by the global options."""
    if args.regpkgdb:
        return PackageRegistry(args.regpkgdb)

    if args.prod:
        dev_mode = False
    elif args.dev:
        dev_mode = True
    else:
        dev_mode = None
    return PackageRegistry(get_regpkgdb_path(args.rootdir, dev_mode=dev_mode))


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbose flag
    if args.verbose:
        import logging
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s',
            stream=sys.stderr
        )

    from . import colors
    colors.init(nocolor=args.nocolor)

    from . import display
    if getattr(args, 'json', False):
        display.init(mode='json')
    elif getattr(args, 'flat', False):
        display.init(mode='flat')
    else:
        display.init(mode='columns')

    if not args.command:
        parser.print_help()
        return 1

    registry = open_registry(args)

    try:
        if args.command in ('orphans', 'o', 'list-orphans'):
            return cmd_orphans(args, registry)

        elif args.command in ('list', 'l'):
            return cmd_list(args, registry)

        elif args.command in ('show', 'sh', 'info'):
            return cmd_show(args, registry)

        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130

    except RegistryError as e:
        if args.verbose:
            import traceback
            traceback.print_exc()
        print(colors.error(f"Error: {e}"), file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
