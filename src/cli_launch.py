"""CLI entry point for the version-aware node launcher.

Installed as ``node-launcher`` (and typically symlinked as ``node``, ``npm``,
``npx``). Every argument after argv[0] belongs to the launched program, so
nothing is parsed here.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from common.logging_utils import configure_logging
from constants import _load_yaml_config
from errors import NodeClerkError
from launcher import launch

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> None:
    """Resolve, run and exit with the child's status."""
    argv = list(sys.argv if argv is None else argv)
    _load_yaml_config()
    configure_logging()

    try:
        exit_code = launch(argv)
    except NodeClerkError as e:
        logger.debug("Launch failed", exc_info=True)
        sys.stderr.write(f"node-launcher: {e.describe()}\n")
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
