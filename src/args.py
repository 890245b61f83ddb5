"""Argument parsing functionality for nodeclerk."""

import argparse


def build_parser():
    """Build the nodeclerk argument parser."""
    parser = argparse.ArgumentParser(
        prog="nodeclerk",
        description="nodeclerk - inspect and run locally installed node versions",
        add_help=True,
    )
    parser.add_argument("--log-level",
                        dest="LOG_LEVEL",
                        help="Logging level (default: WARNING)",
                        action="store",
                        type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        default=None)
    parser.add_argument("-C", "--dir",
                        dest="START_DIR",
                        help="Directory to resolve the pinned version for (default: cwd)",
                        action="store",
                        type=str,
                        default=None)

    subparsers = parser.add_subparsers(dest="action", metavar="command")

    subparsers.add_parser("ls", help="List all of the node versions installed locally")
    subparsers.add_parser("current", help="Print the version selected for the directory")

    which = subparsers.add_parser("which", help="Print the path of the selected executable")
    which.add_argument("EXECUTABLE",
                       nargs="?",
                       default=None,
                       help="Executable name (default: node)")

    exec_parser = subparsers.add_parser(
        "exec", help="Run an executable of the selected version"
    )
    exec_parser.add_argument("EXEC_COMMAND",
                             nargs=argparse.REMAINDER,
                             help="Executable and arguments, optionally after '--'")

    subparsers.add_parser("ls-remote", help="List all of the available node versions")
    subparsers.add_parser("install", help="Install the specified version")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
