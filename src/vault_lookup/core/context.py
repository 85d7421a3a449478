"""
Host lookup context.

The host resolver hands every lookup a context object. ``LookupContext`` is
the capability set the backend uses; ``SimpleLookupContext`` is an in-memory
implementation for the CLI and tests.
"""

import logging
import os
import re
from collections.abc import Callable, Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\${([A-Za-z0-9_]+)}")


class LookupContext(Protocol):
    """Callbacks offered by the host resolver.

    Besides the five core capabilities (``cache_has_key``, ``cache``,
    ``explain``, ``not_found`` and ``interpolate``) host adapters must
    implement ``cached_value``: when ``cache_has_key(key)`` is true the
    backend returns ``cached_value(key)`` without reading the store.
    """

    def cache_has_key(self, key: str) -> bool: ...

    def cached_value(self, key: str) -> Any: ...

    def cache(self, key: str, value: Any) -> Any: ...

    def explain(self, message: Callable[[], str]) -> None: ...

    def not_found(self) -> None: ...

    def interpolate(self, value: Any) -> Any: ...


class SimpleLookupContext:
    """In-memory lookup context.

    Explanations are collected in ``explanations`` and, if a sink is given,
    forwarded to it as they arrive. ``interpolate`` expands ``${VAR}``
    references from the given environment unless ``expand_variables`` is off.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        sink: Callable[[str], None] | None = None,
        expand_variables: bool = True,
    ):
        self.environ = os.environ if environ is None else environ
        self.sink = sink
        self.expand_variables = expand_variables
        self.explanations: list[str] = []
        self.not_found_count = 0
        self._cache: dict[str, Any] = {}

    def cache_has_key(self, key: str) -> bool:
        return key in self._cache

    def cached_value(self, key: str) -> Any:
        return self._cache[key]

    def cache(self, key: str, value: Any) -> Any:
        self._cache[key] = value
        return value

    def explain(self, message: Callable[[], str]) -> None:
        text = message()
        self.explanations.append(text)
        if self.sink is not None:
            self.sink(text)

    def not_found(self) -> None:
        self.not_found_count += 1

    def interpolate(self, value: Any) -> Any:
        """Expand ``${VAR}`` references in strings, lists and dicts.

        References to unset variables are left as written. Nothing is expanded
        when the context was created with ``expand_variables=False``.
        """
        if not self.expand_variables:
            return value
        if isinstance(value, str):
            return self._interpolate_string(value)
        if isinstance(value, list):
            return [self.interpolate(item) for item in value]
        if isinstance(value, dict):
            return {k: self.interpolate(v) for k, v in value.items()}
        return value

    def _interpolate_string(self, value: str) -> str:
        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in self.environ:
                logger.debug(f"Leaving ${{{name}}} unexpanded: variable is not set")
                return match.group(0)
            return self.environ[name]

        return ENV_VAR_PATTERN.sub(replace, value)
