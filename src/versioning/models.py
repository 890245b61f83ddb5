"""Data models for version pins, ranges and resolution outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import semantic_version


class PinSource(Enum):
    """Enum for the configuration sources a pin can be read from."""
    PACKAGE_CONFIG = "package-config"
    VERSION_FILE = "version-file"
    RC_FILE = "rc-file"


@dataclass(frozen=True)
class Pin:
    """Raw, unparsed version constraint found in project configuration."""
    raw: str
    source: PinSource
    path: str  # file the pin was read from


@dataclass(frozen=True)
class Range:
    """Predicate over versions derived from a pin string."""
    raw: str
    spec: semantic_version.NpmSpec = field(compare=False, repr=False)

    def test(self, version: semantic_version.Version) -> bool:
        """Return True if the version satisfies this range."""
        return self.spec.match(version)

    def __str__(self) -> str:
        return self.raw


@dataclass
class Resolution:
    """Outcome of one resolve pass, for reporting and logging."""
    start_dir: str
    pin: Optional[Pin]
    range: Optional[Range]
    version: semantic_version.Version
