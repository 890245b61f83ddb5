"""Discover the version pin for a directory by walking up to the filesystem root.

Each directory is checked with a fixed sequence of probes; the first probe
that yields a pin wins and the walk stops there:

1. ``package.json`` with a string ``engines.node`` field
2. ``.node-version``
3. ``.nvmrc``

A probe that finds a missing, unreadable or malformed file reports nothing,
so the next probe (and then the parent directory) is tried. An empty version
file is still a pin; it stops the walk and carries no constraint.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Callable, Iterator, Optional, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.models import Pin, PinSource, Range
from versioning.parser import parse_range

logger = logging.getLogger(__name__)

Probe = Callable[[str], Optional[Pin]]


def read_package_json(dir_path: str) -> Optional[Pin]:
    """Return ``engines.node`` from package.json, if present and a string."""
    file_path = os.path.join(dir_path, Constants.PACKAGE_JSON_FILE)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable manifest %s: %s", file_path, e)
        return None

    if not isinstance(data, dict):
        return None
    engines = data.get(Constants.ENGINES_FIELD)
    if not isinstance(engines, dict):
        return None
    wanted = engines.get(Constants.RUNTIME)
    if not isinstance(wanted, str):
        return None
    return Pin(raw=wanted, source=PinSource.PACKAGE_CONFIG, path=file_path)


def _read_version_file(dir_path: str, file_name: str, source: PinSource) -> Optional[Pin]:
    file_path = os.path.join(dir_path, file_name)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read().strip()
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable version file %s: %s", file_path, e)
        return None
    return Pin(raw=content, source=source, path=file_path)


def read_node_version_file(dir_path: str) -> Optional[Pin]:
    """Return the trimmed content of .node-version."""
    return _read_version_file(dir_path, Constants.NODE_VERSION_FILE, PinSource.VERSION_FILE)


def read_nvmrc(dir_path: str) -> Optional[Pin]:
    """Return the trimmed content of .nvmrc."""
    return _read_version_file(dir_path, Constants.NVMRC_FILE, PinSource.RC_FILE)


# Highest priority first
PROBES: Tuple[Probe, ...] = (
    read_package_json,
    read_node_version_file,
    read_nvmrc,
)


def iter_ancestors(start_dir: str) -> Iterator[str]:
    """Yield start_dir and then each parent, ending with the filesystem root."""
    current = os.path.abspath(start_dir)
    while True:
        yield current
        parent = os.path.dirname(current)
        if parent == current:
            return
        current = parent


def probe_directory(dir_path: str) -> Optional[Pin]:
    """Run the probes against one directory; first hit wins."""
    for probe in PROBES:
        pin = probe(dir_path)
        if pin is not None:
            return pin
    return None


def find_pin(start_dir: str) -> Optional[Pin]:
    """Return the first pin found walking up from start_dir, or None."""
    for dir_path in iter_ancestors(start_dir):
        pin = probe_directory(dir_path)
        if pin is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Found version pin",
                    extra=extra_context(
                        component="discovery",
                        source=pin.source.value,
                        target=pin.path,
                        pin=pin.raw,
                    ),
                )
            return pin
    logger.debug("No version pin found above %s", start_dir)
    return None


def range_for_pin(pin: Optional[Pin]) -> Optional[Range]:
    """Parse a discovered pin; None when absent, empty or unparsable."""
    if pin is None:
        return None
    want = parse_range(pin.raw)
    if want is None:
        logger.info("Pin %r in %s is not a usable range; using newest installed", pin.raw, pin.path)
    return want


def resolve(start_dir: str) -> Optional[Range]:
    """Return the range pinned for start_dir, or None for "no preference".

    An unparsable pin also yields None; the walk does not resume above it.
    """
    return range_for_pin(find_pin(start_dir))
