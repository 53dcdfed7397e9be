"""
xdgkit CLI argument parser.

This module implements the command-line interface for xdgkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from xdgkit import __version__

logger = logging.getLogger(__name__)


class CLI:
    """xdgkit command-line interface."""

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
            prog="xdgkit",
            description="xdgkit - run the bundled xdg-utils scripts",
            epilog='Use "xdgkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"xdgkit {__version__}"
        )
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
            help="Path to configuration file (default: ./xdgkit.yaml)",
        )
        parser.add_argument(
            "--script-dir",
            type=Path,
            metavar="DIR",
            help="Use pre-extracted scripts from DIR instead of the cache",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_resolve_command(subparsers)
        self._add_run_command(subparsers)
        self._add_preload_command(subparsers)
        self._add_verify_command(subparsers)

        return parser

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Print the executable path for a tool",
            description="Resolve a tool name, extracting the script if needed",
        )
        parser.add_argument("tool", metavar="TOOL", help="Tool name (e.g., xdg-open)")

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run a tool",
            description="Resolve a tool and run it, printing its output",
        )
        parser.add_argument("tool", metavar="TOOL", help="Tool name (e.g., xdg-mime)")
        parser.add_argument(
            "tool_args",
            nargs=argparse.REMAINDER,
            metavar="ARGS",
            help="Arguments passed to the tool",
        )

    def _add_preload_command(self, subparsers):
        """Add 'preload' subcommand."""
        parser = subparsers.add_parser(
            "preload",
            help="Extract tools ahead of time",
            description="Extract bundled tools to the cache",
        )
        parser.add_argument(
            "tools",
            nargs="*",
            metavar="TOOL",
            help="Tools to extract (default: all bundled tools)",
        )

    def _add_verify_command(self, subparsers):
        """Add 'verify' subcommand."""
        parser = subparsers.add_parser(
            "verify",
            help="Check extracted tools against the bundled scripts",
            description="Report whether cached copies match the bundled scripts",
        )
        parser.add_argument(
            "tools",
            nargs="*",
            metavar="TOOL",
            help="Tools to check (default: all bundled tools)",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

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
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
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
            level = logging.WARNING
            format_str = "%(levelname)s: %(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "resolve": "xdgkit.cli.commands.resolve",
            "run": "xdgkit.cli.commands.run",
            "preload": "xdgkit.cli.commands.preload",
            "verify": "xdgkit.cli.commands.verify",
        }

        module_name = command_map.get(args.command)
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
