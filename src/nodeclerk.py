"""nodeclerk - companion CLI for the version-aware node launcher.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from args import build_parser
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, _load_yaml_config
from errors import NodeClerkError
from launcher import executable_for, resolve_version, run
from local.inventory import get_executable_path, list_local_versions
from versioning.parser import format_version

logger = logging.getLogger(__name__)


def _selected_or_none(start_dir):
    """Version selected for start_dir, or None when selection fails."""
    try:
        return resolve_version(start_dir).version
    except NodeClerkError as e:
        logger.debug("No selection for %s: %s", start_dir, e)
        return None


def cmd_ls(args):
    """Print each installed version, marking the one selected for the directory."""
    versions = sorted(list_local_versions())
    selected = _selected_or_none(args.START_DIR) if versions else None
    for version in versions:
        marker = "->" if version == selected else "  "
        print(f"{marker} {format_version(version)}")
    return ExitCodes.SUCCESS.value


def cmd_current(args):
    """Print the version the launcher would run for the directory."""
    resolution = resolve_version(args.START_DIR)
    print(format_version(resolution.version))
    return ExitCodes.SUCCESS.value


def cmd_which(args):
    """Print the canonical executable path for the selected version."""
    resolution = resolve_version(args.START_DIR)
    name = args.EXECUTABLE or executable_for(None)
    print(get_executable_path(resolution.version, name))
    return ExitCodes.SUCCESS.value


def cmd_exec(args):
    """Run an executable of the selected version, forwarding its arguments."""
    command = list(args.EXEC_COMMAND or [])
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        sys.stderr.write(
            "Error: No command provided.\n"
            "Usage: nodeclerk exec [--] <executable> [args...]\n"
        )
        return ExitCodes.USAGE_ERROR.value
    resolution = resolve_version(args.START_DIR)
    return run(resolution.version, command[1:], executable_for(command[0]))


def cmd_unimplemented(args):
    """Placeholder for subcommands that need network access."""
    sys.stderr.write(f"nodeclerk {args.action}: not implemented\n")
    return ExitCodes.USAGE_ERROR.value


COMMANDS = {
    "ls": cmd_ls,
    "current": cmd_current,
    "which": cmd_which,
    "exec": cmd_exec,
    "ls-remote": cmd_unimplemented,
    "install": cmd_unimplemented,
}


def main(argv=None):
    """Main function of the program."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _load_yaml_config()
    # Honor CLI --log-level by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(component="cli", action=args.action),
        )

    handler = COMMANDS.get(args.action)
    if handler is None:
        parser.print_help()
        sys.exit(ExitCodes.SUCCESS.value)

    try:
        exit_code = handler(args)
    except NodeClerkError as e:
        logger.debug("Command failed", exc_info=True)
        sys.stderr.write(f"nodeclerk: {e.describe()}\n")
        sys.exit(e.exit_code)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
