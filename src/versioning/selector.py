"""Best-match selection over the local inventory."""

from typing import Iterable, Optional

import semantic_version

from errors import NoLocalVersionsFound, NoMatchingVersion

from .models import Range


def select_version(
    want: Optional[Range], available: Iterable[semantic_version.Version]
) -> semantic_version.Version:
    """Pick the newest installed version satisfying the range.

    Args:
        want: Active range, or None to accept any installed version.
        available: Installed versions.

    Returns:
        The maximum matching version; always a member of ``available``.

    Raises:
        NoLocalVersionsFound: Nothing is installed (checked before the range).
        NoMatchingVersion: Nothing installed satisfies the range.
    """
    available = list(available)
    if not available:
        raise NoLocalVersionsFound(
            "no local versions found; install a version with nvm first"
        )

    best: Optional[semantic_version.Version] = None
    for version in available:
        if want is not None and not want.test(version):
            continue
        if best is None or version > best:
            best = version

    if best is None:
        raise NoMatchingVersion(
            f"no installed version satisfies '{want}' "
            f"(installed: {', '.join(str(v) for v in sorted(available))})"
        )
    return best
