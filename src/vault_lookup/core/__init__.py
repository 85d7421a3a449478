"""Secret lookup pipeline.

Resolves configuration keys against HashiCorp Vault KV mounts (v1 and v2)
for hierarchical configuration resolvers.
"""

from .backend import VaultLookupBackend, lookup_key
from .client import SecretClient, normalize_payload
from .context import LookupContext, SimpleLookupContext
from .credentials import SKIP_TOKEN, resolve_token
from .errors import (
    NOT_FOUND,
    ConfigurationError,
    LookupSkipped,
    StoreError,
    VaultLookupError,
)
from .filters import KeyFilter, compile_patterns
from .loader import load_options, load_raw_options
from .options import LookupOptions, parse_options
from .paths import CandidatePath, build_candidate_paths
from .shaping import parse_field_value, shape_payload

__all__ = [
    "VaultLookupBackend",
    "lookup_key",
    "SecretClient",
    "normalize_payload",
    "LookupContext",
    "SimpleLookupContext",
    "SKIP_TOKEN",
    "resolve_token",
    "NOT_FOUND",
    "ConfigurationError",
    "LookupSkipped",
    "StoreError",
    "VaultLookupError",
    "KeyFilter",
    "compile_patterns",
    "load_options",
    "load_raw_options",
    "LookupOptions",
    "parse_options",
    "CandidatePath",
    "build_candidate_paths",
    "parse_field_value",
    "shape_payload",
]
