"""Pin and version string parsing utilities."""

import logging
import re
from typing import Optional, Union

import semantic_version

from constants import Constants

from .models import Range

logger = logging.getLogger(__name__)

_V_PREFIX = re.compile(r'^[vV](?=\d)')


def strip_v_prefix(s: str) -> str:
    """Drop a single leading 'v' when it precedes a digit ("v18.1.0" -> "18.1.0")."""
    return _V_PREFIX.sub('', s, count=1)


def parse_version(tag: str) -> Optional[semantic_version.Version]:
    """Parse a version tag such as a store directory name.

    Returns None for anything that is not a strict semantic version.
    """
    try:
        return semantic_version.Version(strip_v_prefix(tag.strip()))
    except ValueError:
        return None


def format_version(version: semantic_version.Version) -> str:
    """Canonical 'v'-prefixed form used by the version store."""
    return f"v{version}"


def parse_range(pin: Union[str, bytes, None]) -> Optional[Range]:
    """Convert a pin into a Range, or None when it carries no usable constraint.

    Never raises. Aliases meaning "newest" and anything the npm range grammar
    rejects both yield None, so callers fall back to the newest install.
    """
    if pin is None:
        return None
    if isinstance(pin, bytes):
        try:
            pin = pin.decode('utf-8')
        except UnicodeDecodeError:
            logger.debug("Pin is not valid UTF-8; ignoring")
            return None
    if not isinstance(pin, str):
        return None

    text = strip_v_prefix(pin.strip())
    if not text or text.lower() in Constants.LATEST_ALIASES:
        return None

    try:
        spec = semantic_version.NpmSpec(text)
    except Exception as e:  # pylint: disable=broad-exception-caught
        # ValueError for grammar errors, but odd input can trip other paths
        logger.debug("Ignoring unparsable pin %r: %s", pin, e)
        return None
    return Range(raw=text, spec=spec)
