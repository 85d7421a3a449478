"""Options loader.

Loads lookup options from a YAML file for hosts that keep them on disk
instead of passing a mapping per call.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError
from .options import LookupOptions, parse_options

logger = logging.getLogger(__name__)

OPTIONS_ENV = "VAULT_LOOKUP_OPTIONS"


def find_options_file() -> Path | None:
    """Locate the options file.

    Looks for:
    1. VAULT_LOOKUP_OPTIONS environment variable
    2. ~/.vault-lookup/options.yaml
    3. ./vault-lookup.yaml
    """
    env_path = os.environ.get(OPTIONS_ENV)
    if env_path:
        return Path(env_path)

    candidates = [Path.home() / ".vault-lookup" / "options.yaml", Path.cwd() / "vault-lookup.yaml"]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_raw_options(config_path: Path | None = None) -> dict[str, Any]:
    """Load the raw options mapping from YAML.

    An optional top-level ``vault`` section is unwrapped.

    Raises:
        FileNotFoundError: If an explicitly requested file doesn't exist
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if config_path is None:
        config_path = find_options_file()
        if config_path is None:
            logger.info("No options file found, using empty options")
            return {}

    if not config_path.exists():
        raise FileNotFoundError(f"Options file not found at {config_path}")

    logger.debug(f"Loading lookup options from: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML options file {config_path}: {e}") from e

    if not raw_config:
        logger.info("Empty options file, using empty options")
        return {}

    if not isinstance(raw_config, Mapping):
        raise ConfigurationError(f"Options file {config_path} must contain a mapping")

    section = raw_config.get("vault", raw_config)
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"'vault' section in {config_path} must be a mapping")
    return dict(section)


def load_options(
    config_path: Path | None = None, overrides: Mapping[str, Any] | None = None
) -> LookupOptions:
    """Load and validate lookup options.

    Args:
        config_path: Optional path to the options file
        overrides: Values that replace the file's (None values are ignored)

    Returns:
        Validated LookupOptions
    """
    raw = load_raw_options(config_path)
    for name, value in (overrides or {}).items():
        if value is not None:
            raw[name] = value
    return parse_options(raw)
