"""Resolve the pinned runtime version for a directory and run it.

The launcher spawns the selected executable, waits for it and hands its exit
status back. While the child runs, termination signals sent to the launcher
are relayed to the child. Terminal interrupts already reach the child through
the foreground process group, so the launcher ignores SIGINT meanwhile.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import SpawnFailed
from local import discovery
from local.inventory import get_executable_path, list_local_versions
from versioning.models import Resolution
from versioning.selector import select_version

logger = logging.getLogger(__name__)

_FORWARDED_SIGNALS = [signal.SIGTERM]
if hasattr(signal, "SIGHUP"):
    _FORWARDED_SIGNALS.append(signal.SIGHUP)


def resolve_version(start_dir: Optional[str] = None, store_dir: Optional[str] = None) -> Resolution:
    """Run discovery, inventory and selection for a directory.

    Raises:
        NodeClerkError: Any store or selection failure.
    """
    start_dir = os.path.abspath(start_dir or os.getcwd())
    pin = discovery.find_pin(start_dir)
    want = discovery.range_for_pin(pin)

    available = list_local_versions(store_dir)
    version = select_version(want, available)
    logger.info(
        "Selected node %s (%s)",
        version,
        f"{pin.source.value} {pin.path}: {pin.raw}" if pin is not None else "no pin",
    )
    return Resolution(start_dir=start_dir, pin=pin, range=want, version=version)


def executable_for(program: Optional[str]) -> str:
    """Name of the executable to run, based on how the launcher was invoked.

    NODECLERK_EXECUTABLE and the config file win over the program name;
    unknown program names fall back to ``node``.
    """
    override = os.environ.get(Constants.ENV_EXECUTABLE) or Constants.CONFIG_EXECUTABLE
    if override:
        return override
    name = os.path.basename(program or "")
    if name.endswith(".exe"):
        name = name[:-4]
    if name in Constants.KNOWN_EXECUTABLES:
        return name
    return Constants.DEFAULT_EXECUTABLE


@contextmanager
def _relay_signals(proc: subprocess.Popen) -> Iterator[None]:
    """Relay termination signals to the child for the duration of the block.

    SIGINT is ignored rather than relayed; the child gets it from the terminal.
    """

    def _forward(signum, _frame):
        logger.debug("Forwarding signal %s to pid %s", signum, proc.pid)
        try:
            proc.send_signal(signum)
        except OSError:
            pass  # child already gone

    previous = {}
    try:
        for sig in _FORWARDED_SIGNALS:
            previous[sig] = signal.signal(sig, _forward)
        previous[signal.SIGINT] = signal.signal(signal.SIGINT, signal.SIG_IGN)
    except ValueError:
        # Not on the main thread; signals go to the process group anyway
        pass
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _exit_status(returncode: int) -> int:
    """Map a Popen return code to a shell exit status (signal N -> 128 + N)."""
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


def run(
    version: semantic_version.Version,
    args: Sequence[str],
    executable: str = Constants.DEFAULT_EXECUTABLE,
    store_dir: Optional[str] = None,
) -> int:
    """Run an executable of the given version and return its exit status.

    Args:
        version: Installed version to run.
        args: Arguments forwarded verbatim (argv[1:] of the launcher).
        executable: Binary name under the version's bin directory.
        store_dir: Version store root override.

    Raises:
        ExecutableNotFound: The executable does not exist for this version.
        SpawnFailed: The process could not be started.
    """
    path = get_executable_path(version, executable, store_dir)
    cmd: List[str] = [str(path)] + list(args)

    if is_debug_enabled(logger):
        logger.debug(
            "Spawning executable",
            extra=extra_context(component="launcher", target=str(path), count=len(args)),
        )

    try:
        proc = subprocess.Popen(cmd)  # noqa: S603
    except OSError as e:
        raise SpawnFailed(f"unable to start {path}: {e}", str(path)) from e

    with _relay_signals(proc):
        returncode = proc.wait()

    status = _exit_status(returncode)
    logger.debug("Child %s exited with status %s", proc.pid, status)
    return status


def launch(
    argv: Sequence[str],
    cwd: Optional[str] = None,
    executable: Optional[str] = None,
    store_dir: Optional[str] = None,
) -> int:
    """Full pipeline: resolve for cwd, then run with argv[1:].

    Returns:
        The child's exit status.

    Raises:
        NodeClerkError: On any failure before the child exits.
    """
    program = argv[0] if argv else None
    name = executable or executable_for(program)
    resolution = resolve_version(cwd, store_dir)
    return run(resolution.version, list(argv[1:]), name, store_dir)
