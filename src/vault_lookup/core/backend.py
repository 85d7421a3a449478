"""
Lookup orchestration.

``VaultLookupBackend.lookup_key`` is the entry point a host resolver calls
once per key:

1. Validate options and compile key patterns (configuration errors are fatal)
2. Resolve the token; ``IGNORE-VAULT`` reports a miss without any I/O
3. Walk candidate paths in mount/prefix order, reading each until one hits
4. Shape the hit, then interpolate and cache it through the host context

Store errors are reported through ``explain`` and raised, unless
``continue_if_not_found`` is set, in which case the next candidate is tried.
"""

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from .client import ADDRESS_ENV, SecretClient
from .context import LookupContext
from .credentials import resolve_token
from .errors import NOT_FOUND, LookupSkipped, StoreError, diagnostic
from .filters import KeyFilter
from .options import LookupOptions, parse_options
from .paths import build_candidate_paths
from .shaping import shape_payload

logger = logging.getLogger(__name__)

ClientFactory = Callable[[LookupOptions, str, str | None], SecretClient]


class VaultLookupBackend:
    """Resolves lookup keys against Vault.

    The backend keeps no state between calls. The environment and the client
    factory are injected so hosts and tests can replace them.

    Example:
        >>> backend = VaultLookupBackend()
        >>> context = SimpleLookupContext()
        >>> value = backend.lookup_key(
        ...     "db_password",
        ...     {"mounts": {"secret": ["common"]}, "default_field": "value"},
        ...     context,
        ... )
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        client_factory: ClientFactory = SecretClient,
    ):
        self.environ = os.environ if environ is None else environ
        self.client_factory = client_factory

    def lookup_key(
        self,
        key: str,
        options: Mapping[str, Any] | LookupOptions | None,
        context: LookupContext,
    ) -> Any:
        """Resolve a key.

        Args:
            key: The lookup key
            options: Raw options mapping or validated LookupOptions
            context: Host callbacks

        Returns:
            The resolved value, or NOT_FOUND after ``context.not_found()``

        Raises:
            ConfigurationError: If the options are invalid or no token is set
            StoreError: If a read fails and ``continue_if_not_found`` is not set
        """
        lookup_options = parse_options(options)
        key_filter = KeyFilter.from_options(lookup_options)

        try:
            token = resolve_token(lookup_options.token, self.environ)
        except LookupSkipped as e:
            self._explain(context, f"{e} - Quitting early")
            return self._not_found(context)

        if context.cache_has_key(key):
            logger.debug(f"Returning cached value for '{key}'")
            return context.cached_value(key)

        if not key_filter.is_allowed(key):
            self._explain(context, f"Skipping lookup of '{key}': does not match confine_to_keys")
            return self._not_found(context)

        if not lookup_options.mounts:
            self._explain(context, "No mounts configured")
            return self._not_found(context)

        with self.client_factory(lookup_options, token, self.environ.get(ADDRESS_ENV)) as client:
            value = self._read_candidates(key, key_filter, lookup_options, client, context)

        if value is NOT_FOUND:
            return self._not_found(context)

        return context.cache(key, context.interpolate(value))

    def _read_candidates(
        self,
        key: str,
        key_filter: KeyFilter,
        options: LookupOptions,
        client: SecretClient,
        context: LookupContext,
    ) -> Any:
        processed_key = key_filter.strip(key)
        candidates = build_candidate_paths(
            options.mounts, key, processed_key, client.detect_kv_version
        )

        for candidate in candidates:
            path = context.interpolate(candidate.path)
            try:
                payload = client.read(path, candidate.kv_version)
            except StoreError as e:
                self._explain(context, str(e))
                logger.warning(str(e))
                if options.continue_if_not_found:
                    continue
                raise

            if payload is None:
                logger.debug(f"No secret at {path}")
                continue

            self._explain(context, f"Read secret: {key}")
            return shape_payload(payload, options)

        logger.debug(f"Key '{key}' not found in any mount")
        return NOT_FOUND

    def _explain(self, context: LookupContext, message: str) -> None:
        text = diagnostic(message)
        logger.debug(text)
        context.explain(lambda: text)

    def _not_found(self, context: LookupContext) -> Any:
        context.not_found()
        return NOT_FOUND


_default_backend = VaultLookupBackend()


def lookup_key(
    key: str,
    options: Mapping[str, Any] | LookupOptions | None,
    context: LookupContext,
) -> Any:
    """Resolve a key with a backend reading the process environment."""
    return _default_backend.lookup_key(key, options, context)
