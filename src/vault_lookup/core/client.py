"""
Secret store client.

Thin wrapper around ``hvac.Client`` that reads one logical path, folds the
KV v1 and KV v2 response envelopes into a single flat payload, and turns
transport and server failures into StoreError.
"""

import logging
from typing import Any

import hvac
import requests
from hvac import exceptions as hvac_exceptions

from .errors import StoreError
from .options import LookupOptions
from .paths import KV_V1, KV_V2

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "http://127.0.0.1:8200"
ADDRESS_ENV = "VAULT_ADDR"


def normalize_payload(response: dict[str, Any] | None, kv_version: int) -> dict[str, Any] | None:
    """Unwrap a read response into the secret's field mapping.

    KV v2 nests fields under ``data.data``; KV v1 uses ``data`` directly.
    Returns None for an empty response and for a deleted KV v2 version,
    whose ``data.data`` is null.

    Raises:
        ValueError: If the envelope has any other shape
    """
    if not response:
        return None

    data = response.get("data")
    if kv_version == KV_V2:
        if not isinstance(data, dict) or "data" not in data:
            raise ValueError("malformed response: expected a KV v2 envelope under 'data.data'")
        data = data["data"]
        if data is None:
            return None

    if not isinstance(data, dict):
        raise ValueError(f"malformed response: secret data is {type(data).__name__}, not a mapping")

    return {str(field): value for field, value in data.items()}


class SecretClient:
    """Read-only access to the secret store for one lookup call.

    The underlying hvac client is created lazily and released by
    ``cleanup()``; instances also work as context managers.
    """

    def __init__(self, options: LookupOptions, token: str, address: str | None = None):
        self.options = options
        self.token = token
        self.address = options.address or address or DEFAULT_ADDRESS
        self._vault_client: hvac.Client | None = None

    @property
    def vault_client(self) -> hvac.Client:
        if self._vault_client is None:
            self._vault_client = self._init_vault_client()
        return self._vault_client

    def _init_vault_client(self) -> hvac.Client:
        verify: bool | str = self.options.ssl_verify
        if verify and self.options.ssl_ca_cert:
            verify = self.options.ssl_ca_cert

        kwargs: dict[str, Any] = {
            "url": self.address,
            "token": self.token,
            "verify": verify,
            "timeout": self.options.timeout,
        }
        if self.options.ssl_pem_file:
            kwargs["cert"] = self.options.ssl_pem_file
        if self.options.namespace:
            kwargs["namespace"] = self.options.namespace

        logger.debug(f"Connecting to Vault at {self.address}")
        return hvac.Client(**kwargs)

    def read(self, path: str, kv_version: int = KV_V1) -> dict[str, Any] | None:
        """Read the secret at a storage path.

        Args:
            path: Fully qualified storage path (``<mount>/...``)
            kv_version: Engine version the path was built for

        Returns:
            The secret payload, or None if there is no secret at the path

        Raises:
            StoreError: On any transport or server failure, or a malformed response
        """
        logger.debug(f"Reading secret at {path}")
        try:
            response = self.vault_client.read(path)
        except hvac_exceptions.InvalidPath:
            return None
        except (hvac_exceptions.VaultError, requests.exceptions.RequestException) as e:
            raise StoreError(path, e) from e

        if response is not None and not isinstance(response, dict):
            raise StoreError(path, f"unexpected response type {type(response).__name__}")

        try:
            return normalize_payload(response, kv_version)
        except ValueError as e:
            raise StoreError(path, e) from e

    def detect_kv_version(self, mount: str) -> int | None:
        """Probe the KV engine version of a mount.

        A configured ``kv_version`` wins. Returns None when the probe fails or
        the mount reports no version; callers treat that as KV v1.
        """
        if self.options.kv_version is not None:
            return self.options.kv_version

        try:
            response = self.vault_client.read(f"sys/internal/ui/mounts/{mount.strip('/')}")
        except (hvac_exceptions.VaultError, requests.exceptions.RequestException) as e:
            logger.debug(f"Could not probe engine version of mount '{mount}': {e}")
            return None

        if not isinstance(response, dict):
            return None
        mount_options = (response.get("data") or {}).get("options") or {}
        version = str(mount_options.get("version", ""))
        logger.debug(f"Mount '{mount}' reports KV version '{version or 'unknown'}'")
        return KV_V2 if version == "2" else KV_V1

    def cleanup(self) -> None:
        """Release the underlying HTTP session. Safe to call more than once."""
        if self._vault_client is not None:
            self._vault_client.adapter.close()
            self._vault_client = None

    def __enter__(self) -> "SecretClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
