"""Pydantic model for per-call lookup options.

A host passes one options mapping per lookup. The mapping looks like the
``vault`` section of an options file:

```yaml
vault:
  address: "https://vault.example.com:8200"
  token: "/etc/vault/token"
  mounts:
    secret:
      - "common"
      - "nodes/${NODE_NAME}"
  default_field: "value"
  default_field_parse: "json"
  continue_if_not_found: true
```
"""

import re
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import ConfigDict, ValidationError, ValidationInfo, field_validator

from vault_lookup.models import LookupBaseModel

from .errors import ConfigurationError

DEFAULT_FIELD_PARSE_VALUES = ("string", "json")
DEFAULT_FIELD_BEHAVIOR_VALUES = ("ignore", "only")


def _allowed(values: tuple[str, ...]) -> str:
    return ",".join(f"'{v}'" for v in values)


class LookupOptions(LookupBaseModel):
    """Options controlling a single lookup.

    Attributes:
        default_field_parse: How to interpret the default field's value
        default_field_behavior: ``ignore`` turns a missing default field into a
            miss, ``only`` returns the field alone only when it is the secret's
            sole field
        confine_to_keys: Regexes; keys matching none of them are never looked up
        strip_from_keys: Regexes removed from the key before building the path
        address: Vault server URL; falls back to ``VAULT_ADDR``
        token: Token value, path to a file holding it, or ``IGNORE-VAULT``
        mounts: Mount name to ordered list of path prefixes
        default_field: Field to extract from the secret payload
        continue_if_not_found: Move on to the next candidate after a store error
        kv_version: Force a KV engine version instead of probing each mount
        ssl_verify: Verify the server certificate
        ssl_ca_cert: CA bundle used for verification
        ssl_pem_file: Client certificate (PEM with key)
        timeout: Transport timeout in seconds
        namespace: Vault Enterprise namespace

    Keys not listed here (``version``, ``ttl``, ...) are kept as extra fields
    and never interpreted.

    Example:
        >>> options = LookupOptions(
        ...     address="https://vault.example.com",
        ...     mounts={"secret": ["common"]},
        ...     default_field="value",
        ... )
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    # Validated first so option errors are reported in a stable order
    default_field_parse: Literal["string", "json"] = "string"
    default_field_behavior: Literal["ignore", "only"] | None = None
    confine_to_keys: list[str | re.Pattern[str]] | None = None
    strip_from_keys: list[str | re.Pattern[str]] | None = None

    address: str | None = None
    token: str | None = None
    mounts: dict[str, list[str]] = {}
    default_field: str | None = None
    continue_if_not_found: bool = False
    kv_version: Literal[1, 2] | None = None

    ssl_verify: bool = True
    ssl_ca_cert: str | None = None
    ssl_pem_file: str | None = None
    timeout: float = 30
    namespace: str | None = None

    @field_validator("default_field_parse", mode="before")
    @classmethod
    def _check_default_field_parse(cls, value: Any) -> Any:
        if value is None:
            return "string"
        if value not in DEFAULT_FIELD_PARSE_VALUES:
            raise ValueError(
                f"invalid value for default_field_parse: '{value}', "
                f"should be one of {_allowed(DEFAULT_FIELD_PARSE_VALUES)}"
            )
        return value

    @field_validator("default_field_behavior", mode="before")
    @classmethod
    def _check_default_field_behavior(cls, value: Any) -> Any:
        if value is not None and value not in DEFAULT_FIELD_BEHAVIOR_VALUES:
            raise ValueError(
                f"invalid value for default_field_behavior: '{value}', "
                f"should be one of {_allowed(DEFAULT_FIELD_BEHAVIOR_VALUES)}"
            )
        return value

    @field_validator("confine_to_keys", "strip_from_keys", mode="before")
    @classmethod
    def _check_pattern_list(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None and not isinstance(value, (list, tuple)):
            raise ValueError(f"{info.field_name} must be an array")
        return value

    @field_validator("mounts", mode="before")
    @classmethod
    def _check_mounts(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("mounts must be a mapping of mount names to prefix lists")
        # A bare string prefix is a list of one
        return {
            str(mount): [prefixes] if isinstance(prefixes, str) else (prefixes or [])
            for mount, prefixes in value.items()
        }

    @field_validator("token", mode="before")
    @classmethod
    def _blank_token(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def _error_message(exc: ValidationError) -> str:
    """Turn the first validation error into a readable message.

    Messages raised by our own validators are passed through verbatim.
    """
    error = exc.errors()[0]
    original = error.get("ctx", {}).get("error")
    if isinstance(original, ValueError):
        return str(original)
    location = ".".join(str(part) for part in error["loc"])
    return f"invalid value for {location}: {error['msg']}"


def parse_options(raw: "Mapping[str, Any] | LookupOptions | None") -> LookupOptions:
    """Validate a raw options mapping from the host.

    Args:
        raw: Options mapping, an already-built LookupOptions, or None

    Returns:
        Validated, immutable LookupOptions

    Raises:
        ConfigurationError: If any option is invalid
    """
    if isinstance(raw, LookupOptions):
        return raw
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"lookup options must be a mapping, got {type(raw).__name__}")

    try:
        return LookupOptions.model_validate(dict(raw))
    except ValidationError as e:
        raise ConfigurationError(_error_message(e)) from e
