"""Local version store: locating it and listing installed versions."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Set

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import ExecutableNotFound, StoreUnreadable, StoreUnresolvable
from versioning.parser import format_version, parse_version

logger = logging.getLogger(__name__)


def get_store_dir(store_dir: Optional[str] = None) -> Path:
    """Return the canonical version store root.

    Precedence: explicit argument, NVM_DIR, config file, ``~/.nvm``.
    ``~`` is expanded before canonicalization.

    Raises:
        StoreUnresolvable: If the path does not exist.
    """
    raw = (
        store_dir
        or os.environ.get(Constants.ENV_STORE_DIR)
        or Constants.STORE_DIR
        or Constants.DEFAULT_STORE_DIR
    )
    path = Path(os.path.expanduser(raw))
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise StoreUnresolvable(f"unable to resolve local path: {path}", str(path)) from e


def get_versions_dir(store_dir: Optional[str] = None) -> Path:
    """Directory holding one subdirectory per installed runtime version."""
    return get_store_dir(store_dir) / Constants.STORE_VERSIONS_DIR / Constants.RUNTIME


def list_local_versions(store_dir: Optional[str] = None) -> Set[semantic_version.Version]:
    """List installed versions under the store.

    Entries that are not directories or whose names do not parse as a
    version (after dropping a leading 'v') are skipped silently.

    Raises:
        StoreUnresolvable: If the store root cannot be resolved.
        StoreUnreadable: If the versions directory cannot be listed.
    """
    versions_dir = get_versions_dir(store_dir)
    try:
        with os.scandir(versions_dir) as it:
            entries = list(it)
    except OSError as e:
        raise StoreUnreadable(
            f"unable to read directory: {versions_dir}", str(versions_dir)
        ) from e

    versions = set()
    for entry in entries:
        try:
            if not entry.is_dir():
                continue
        except OSError:
            continue
        version = parse_version(entry.name)
        if version is None:
            logger.debug("Skipping non-version entry %s", entry.name)
            continue
        versions.add(version)

    if is_debug_enabled(logger):
        logger.debug(
            "Listed local versions",
            extra=extra_context(
                component="inventory",
                target=str(versions_dir),
                count=len(versions),
            ),
        )
    return versions


def get_executable_path(
    version: semantic_version.Version,
    executable: str = Constants.DEFAULT_EXECUTABLE,
    store_dir: Optional[str] = None,
) -> Path:
    """Canonical path of an executable shipped with an installed version.

    Raises:
        StoreUnresolvable: If the store root cannot be resolved.
        ExecutableNotFound: If the executable does not exist.
    """
    path = (
        get_versions_dir(store_dir)
        / format_version(version)
        / Constants.STORE_BIN_DIR
        / executable
    )
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ExecutableNotFound(f"unable to resolve local path: {path}", str(path)) from e
