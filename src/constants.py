"""Constants used in the project."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    USAGE_ERROR = 2
    SPAWN_FAILED = 126
    EXECUTABLE_NOT_FOUND = 127


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    RUNTIME = "node"
    DEFAULT_EXECUTABLE = "node"
    KNOWN_EXECUTABLES = ["node", "npm", "npx", "corepack"]

    # Project configuration files, in probe order
    PACKAGE_JSON_FILE = "package.json"
    NODE_VERSION_FILE = ".node-version"
    NVMRC_FILE = ".nvmrc"
    ENGINES_FIELD = "engines"

    # Pins meaning "newest installed"
    LATEST_ALIASES = ["latest", "node", "current"]

    # Version store layout: <root>/versions/<runtime>/v<version>/bin/<executable>
    DEFAULT_STORE_DIR = "~/.nvm"
    STORE_VERSIONS_DIR = "versions"
    STORE_BIN_DIR = "bin"

    ENV_STORE_DIR = "NVM_DIR"
    ENV_CONFIG_FILE = "NODECLERK_CONFIG"
    ENV_LOG_LEVEL = "NODECLERK_LOG_LEVEL"
    ENV_EXECUTABLE = "NODECLERK_EXECUTABLE"
    DEFAULT_CONFIG_FILE = "~/.config/nodeclerk/config.yml"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    DEFAULT_LOG_LEVEL = "WARNING"

    # Populated from the YAML config file, when present
    STORE_DIR: Optional[str] = None
    CONFIG_LOG_LEVEL: Optional[str] = None
    CONFIG_EXECUTABLE: Optional[str] = None


def _config_file_path() -> str:
    """Return the YAML config path, honoring the environment override."""
    path = os.environ.get(Constants.ENV_CONFIG_FILE) or Constants.DEFAULT_CONFIG_FILE
    return os.path.expanduser(path)


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML config file and apply recognized keys onto Constants.

    Unknown keys are ignored. A missing file is not an error; an unreadable
    or malformed file is logged and ignored.

    Args:
        path: Explicit config path; defaults to NODECLERK_CONFIG or the
            per-user default location.

    Returns:
        The raw mapping that was loaded (empty when nothing was applied).
    """
    config_path = path or _config_file_path()
    if not os.path.isfile(config_path):
        logger.debug("No config file at %s", config_path)
        return {}

    import yaml  # pylint: disable=import-outside-toplevel

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring config file %s: %s", config_path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not a mapping", config_path)
        return {}

    store = data.get("store")
    if isinstance(store, dict) and isinstance(store.get("dir"), str):
        Constants.STORE_DIR = store["dir"]

    log_cfg = data.get("logging")
    if isinstance(log_cfg, dict) and isinstance(log_cfg.get("level"), str):
        Constants.CONFIG_LOG_LEVEL = log_cfg["level"].upper()

    launcher = data.get("launcher")
    if isinstance(launcher, dict) and isinstance(launcher.get("executable"), str):
        Constants.CONFIG_EXECUTABLE = launcher["executable"]

    logger.debug("Loaded config file %s", config_path)
    return data
