"""vault-lookup - HashiCorp Vault data backend for hierarchical configuration lookups.

## Quick Example

```python
from vault_lookup import SimpleLookupContext, lookup_key

options = {
    "address": "https://vault.example.com:8200",
    "mounts": {"secret": ["common"]},
    "default_field": "value",
}
context = SimpleLookupContext()
password = lookup_key("db_password", options, context)
```
"""

from .core import (
    NOT_FOUND,
    ConfigurationError,
    LookupContext,
    LookupOptions,
    SimpleLookupContext,
    StoreError,
    VaultLookupBackend,
    VaultLookupError,
    lookup_key,
)
from .version import PACKAGE_NAME, PACKAGE_VERSION, get_package_info

__all__ = [
    "NOT_FOUND",
    "ConfigurationError",
    "LookupContext",
    "LookupOptions",
    "SimpleLookupContext",
    "StoreError",
    "VaultLookupBackend",
    "VaultLookupError",
    "lookup_key",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "get_package_info",
]
