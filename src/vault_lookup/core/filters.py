"""
Key confinement and stripping.

Patterns are compiled once per options instance. Confinement is checked
against the raw key; stripping produces the key used in storage paths.
"""

import logging
import re
from collections.abc import Iterable

from .errors import ConfigurationError
from .options import LookupOptions

logger = logging.getLogger(__name__)


def compile_patterns(
    patterns: Iterable[str | re.Pattern[str]] | None, option: str
) -> list[re.Pattern[str]]:
    """Compile user supplied patterns.

    Args:
        patterns: Pattern strings or already compiled patterns
        option: Option name, used in error messages

    Raises:
        ConfigurationError: If a pattern does not compile
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns or []:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigurationError(
                f"creating regexp for {option} failed with: {e}: /{pattern}/"
            ) from e
    return compiled


class KeyFilter:
    """Applies ``confine_to_keys`` and ``strip_from_keys`` to lookup keys."""

    def __init__(
        self,
        confine_to: list[re.Pattern[str]] | None = None,
        strip_from: list[re.Pattern[str]] | None = None,
    ):
        self.confine_to = confine_to or []
        self.strip_from = strip_from or []

    @classmethod
    def from_options(cls, options: LookupOptions) -> "KeyFilter":
        return cls(
            confine_to=compile_patterns(options.confine_to_keys, "confine_to_keys"),
            strip_from=compile_patterns(options.strip_from_keys, "strip_from_keys"),
        )

    def is_allowed(self, key: str) -> bool:
        """True if no confinement is configured or any pattern matches the key."""
        if not self.confine_to:
            return True
        return any(pattern.search(key) for pattern in self.confine_to)

    def strip(self, key: str) -> str:
        """Remove every match of every strip pattern, in order."""
        stripped = key
        for pattern in self.strip_from:
            stripped = pattern.sub("", stripped)
        if stripped != key:
            logger.debug(f"Stripped key '{key}' to '{stripped}'")
        return stripped
