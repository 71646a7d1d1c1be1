"""
goup CLI argument parser.

This module implements the command-line interface for goup using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from goup.core.exceptions import GoupError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("goup")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Command name -> module implementing run(args)
COMMAND_MODULES = {
    "install": "goup.cli.commands.install",
    "default": "goup.cli.commands.default",
    "set": "goup.cli.commands.default",
    "ls": "goup.cli.commands.ls",
    "ls-ver": "goup.cli.commands.ls_ver",
    "search": "goup.cli.commands.search",
    "remove": "goup.cli.commands.remove",
}


class CLI:
    """goup command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="goup",
            description="goup - Go version manager",
            epilog='Use "goup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument("--version", action="version", version=f"goup {__version__}")
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ~/.go/goup.yaml)",
        )
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Answer prompts for unattended use (confirm CL builds, "
            "skip interactive git clean)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_default_command(subparsers)
        self._add_ls_command(subparsers)
        self._add_ls_ver_command(subparsers)
        self._add_search_command(subparsers)
        self._add_remove_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install Go with a version",
            description="Install Go by providing a version. If no version is "
            "provided, install the latest Go. If the version is 'tip', an "
            "optional change list (CL) number can be provided.",
            epilog="examples:\n"
            "  goup install\n"
            "  goup install 1.21.5\n"
            "  goup install go1.21.5\n"
            "  goup install tip          # Compile Go tip\n"
            "  goup install tip 227037   # 227037 is the CL number",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("go_version", nargs="?", metavar="VERSION", help="Go version or 'tip'")
        parser.add_argument("cl", nargs="?", metavar="CL", help="CL number (with 'tip' only)")
        parser.add_argument(
            "--host",
            metavar="HOST",
            help="Host used to download Go (default: $GOUP_GO_HOST or golang.google.cn)",
        )

    def _add_default_command(self, subparsers):
        """Add 'default' subcommand."""
        parser = subparsers.add_parser(
            "default",
            aliases=["set"],
            help="Set the default Go version",
            description="Point the 'current' link at an installed Go version",
        )
        parser.add_argument("go_version", metavar="VERSION", help="Installed Go version")

    def _add_ls_command(self, subparsers):
        """Add 'ls' subcommand."""
        subparsers.add_parser(
            "ls",
            help="List installed Go versions",
            description="List installed Go versions; '*' marks the default",
        )

    def _add_ls_ver_command(self, subparsers):
        """Add 'ls-ver' subcommand."""
        parser = subparsers.add_parser(
            "ls-ver",
            help="List Go versions to install",
            description="List available Go versions containing FILTER. If no "
            "filter is provided, list all available versions.",
        )
        parser.add_argument("filter", nargs="?", default="", metavar="FILTER")

    def _add_search_command(self, subparsers):
        """Add 'search' subcommand."""
        parser = subparsers.add_parser(
            "search",
            help="Search Go versions tagged in the source repository",
            description="Search Go version tags matching REGEXP. If no "
            "regexp is provided, list every tagged version.",
        )
        parser.add_argument("regexp", nargs="?", default="", metavar="REGEXP")

    def _add_remove_command(self, subparsers):
        """Add 'remove' subcommand."""
        parser = subparsers.add_parser(
            "remove",
            help="Remove an installed Go version",
            description="Delete an installed Go version directory",
        )
        parser.add_argument("go_version", metavar="VERSION", help="Installed Go version")

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: List of arguments (default: sys.argv[1:])

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: List of arguments (default: sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except GoupError as e:
            logger.error(f"Error: {e}")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
