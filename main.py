#!/usr/bin/env python3
"""
portowner - Main Entry Point
Shows which processes own sockets on ports containing a given fragment.
"""

import sys
import logging
import argparse
from typing import List, Optional

# Setup logging first
from portowner.logging_config import setup_logging

# Import configuration
from portowner.config_manager import get_config

# Import components
from portowner.aggregator import aggregate_connections
from portowner.report import render_report
from portowner.system_inspector import SystemInspector, ConnectionSourceError

VERSION = "1.0.0"

PRIVILEGE_HINT = "Hint: listing sockets may require elevated privileges (try sudo)"

logger = logging.getLogger(__name__)


class PortOwnerApp:
    """Runs one port ownership lookup."""

    def __init__(self, inspector: Optional[SystemInspector] = None):
        """Initialize the application."""
        # Load configuration
        self.config = get_config()

        log_cfg = self.config.logging
        setup_logging(
            level=log_cfg.level,
            log_to_console=True,
            log_to_file=log_cfg.log_to_file,
            max_file_size_mb=log_cfg.max_file_size_mb,
            backup_count=log_cfg.backup_count
        )

        self.inspector = inspector or SystemInspector(self.config.inspector)

    def run(self, fragment: str) -> int:
        """Collect, aggregate and print; return the process exit status."""
        try:
            connections = self.inspector.get_connections()
        except ConnectionSourceError as e:
            logger.debug("Connection enumeration failed", exc_info=True)
            print(f"Error: Unable to get network connection information: {e}")
            if e.access_denied:
                print(PRIVILEGE_HINT)
            return 1

        processes = aggregate_connections(connections, self.inspector.inspect, fragment)

        print(render_report(
            processes,
            fragment,
            sort_processes=self.config.report.sort_processes,
            sort_labels=self.config.report.sort_labels
        ))
        return 0


def build_parser() -> argparse.ArgumentParser:
    """CLI parser: a single positional port fragment, no options."""
    parser = argparse.ArgumentParser(
        prog="portowner",
        usage="%(prog)s <port>",
        description="Show processes using ports that contain the given digits",
        add_help=False
    )
    parser.add_argument("fragment", help="Digits to look for in local port numbers")
    return parser


def print_usage(parser: argparse.ArgumentParser) -> None:
    parser.print_usage(sys.stdout)
    print(f"Version: {VERSION}")
    print("Note: some systems (e.g. macOS) need root to list other users' sockets")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point with CLI argument parsing."""
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()

    if len(argv) != 1 or not argv[0]:
        print_usage(parser)
        return 1

    # "--" keeps fragments that look like options positional
    args = parser.parse_args(["--", argv[0]])

    app = PortOwnerApp()
    return app.run(args.fragment)


if __name__ == "__main__":
    sys.exit(main())
