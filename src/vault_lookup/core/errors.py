"""Error taxonomy and control-flow signals for secret lookups."""

from typing import Any

MESSAGE_PREFIX = "[vault-lookup]"


class VaultLookupError(Exception):
    """Base class for all vault-lookup errors."""


class ConfigurationError(VaultLookupError, ValueError):
    """Lookup options are invalid. Fatal, never retried."""


class StoreError(VaultLookupError):
    """Reading a secret from the store failed.

    Attributes:
        path: The storage path that was being read
        cause: The underlying transport or server error
    """

    def __init__(self, path: str, cause: Any):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read secret {path}: {cause}")


class LookupSkipped(VaultLookupError):
    """The credential resolved to the skip sentinel; the store must not be queried."""


class _NotFoundType:
    """Marker returned when a key could not be resolved."""

    _instance: "_NotFoundType | None" = None

    def __new__(cls) -> "_NotFoundType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFoundType()


def diagnostic(message: str) -> str:
    """Prefix a diagnostic message for the host's explain channel."""
    return f"{MESSAGE_PREFIX} {message}"
