"""
Token resolution.

The ``token`` option may hold the token itself, the path of a file whose
first line is the token, or nothing, in which case ``VAULT_TOKEN`` is used.
A blank token file counts as nothing.
Any of these may resolve to the ``IGNORE-VAULT`` sentinel, which turns the
lookup into a miss without touching the store.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from .errors import ConfigurationError, LookupSkipped

logger = logging.getLogger(__name__)

SKIP_TOKEN = "IGNORE-VAULT"
TOKEN_ENV = "VAULT_TOKEN"


def _is_token_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        # Long token values can exceed the file name limit
        return False


def _read_token_file(path: Path) -> str:
    # Re-read on every call so rotated tokens are picked up
    try:
        with open(path, encoding="utf-8") as f:
            return f.readline().strip()
    except OSError as e:
        raise ConfigurationError(f"Failed to read token file {path}: {e}") from e


def resolve_token(token: str | None, environ: Mapping[str, str]) -> str:
    """Resolve the token to send to the store.

    Args:
        token: The ``token`` option value
        environ: Environment used for the ``VAULT_TOKEN`` fallback

    Returns:
        The token string

    Raises:
        LookupSkipped: If the token resolves to ``IGNORE-VAULT``
        ConfigurationError: If no token is configured anywhere
    """
    if token == SKIP_TOKEN:
        raise LookupSkipped(f"token set to {SKIP_TOKEN}")

    if token:
        token_path = Path(token)
        if _is_token_file(token_path):
            logger.debug(f"Reading token from file: {token_path}")
            token = _read_token_file(token_path)
            if token == SKIP_TOKEN:
                raise LookupSkipped(f"token set to {SKIP_TOKEN}")
            if not token:
                logger.debug(f"Token file {token_path} is empty")

    if token:
        return token

    env_token = environ.get(TOKEN_ENV)
    if not env_token:
        raise ConfigurationError(f"no token set in options and no token in {TOKEN_ENV}")
    if env_token == SKIP_TOKEN:
        raise LookupSkipped(f"token set to {SKIP_TOKEN}")
    logger.debug(f"Using token from {TOKEN_ENV}")
    return env_token
