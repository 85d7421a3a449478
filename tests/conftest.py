"""
Global pytest configuration and fixtures.

``FakeVault`` stands in for a Vault server behind a patched ``hvac.Client``:
it answers logical reads for KV v1 and KV v2 mounts and the mount probe
endpoint, and records every path read.
"""

from functools import partial
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from hvac import exceptions as hvac_exceptions

from vault_lookup.core import SimpleLookupContext, VaultLookupBackend

ROOT_TOKEN = "root-token"
VAULT_ADDRESS = "http://127.0.0.1:8200"


class FakeVault:
    def __init__(self) -> None:
        self.mounts: dict[str, int] = {}
        self.secrets: dict[str, dict[str, Any]] = {}
        self.reads: list[str] = []
        self.errors: dict[str, Exception] = {}
        self.client_class: MagicMock | None = None
        self.mount_name = ""
        self.clients: list[MagicMock] = []

    def mount(self, name: str, version: int) -> None:
        self.mounts[name] = version

    def write(self, mount: str, path: str, **fields: Any) -> None:
        if self.mounts[mount] == 2:
            self.secrets[f"{mount}/data/{path}"] = fields
        else:
            self.secrets[f"{mount}/{path}"] = fields

    def fail(self, path: str, error: Exception) -> None:
        self.errors[path] = error

    @property
    def secret_reads(self) -> list[str]:
        return [path for path in self.reads if not path.startswith("sys/")]

    def read(self, path: str, token: str | None = ROOT_TOKEN) -> dict[str, Any] | None:
        self.reads.append(path)
        if token != ROOT_TOKEN:
            raise hvac_exceptions.Forbidden("permission denied, invalid token")
        if path in self.errors:
            raise self.errors[path]

        if path.startswith("sys/internal/ui/mounts/"):
            name = path.rsplit("/", 1)[-1]
            if name not in self.mounts:
                return None
            return {"data": {"type": "kv", "options": {"version": str(self.mounts[name])}}}

        if path not in self.secrets:
            return None

        mount = path.split("/", 1)[0]
        fields = dict(self.secrets[path])
        if self.mounts.get(mount) == 2:
            return {"data": {"data": fields, "metadata": {"version": 1}}}
        return {"data": fields, "lease_duration": 2764800}


@pytest.fixture
def vault():
    """A FakeVault wired in place of hvac.Client."""
    fake = FakeVault()
    with patch("hvac.Client") as mock_hvac_client:
        def make_client(**kwargs: Any) -> MagicMock:
            mock_client = MagicMock()
            mock_client.read.side_effect = partial(fake.read, token=kwargs.get("token"))
            fake.clients.append(mock_client)
            return mock_client

        mock_hvac_client.side_effect = make_client
        fake.client_class = mock_hvac_client
        yield fake


def seed(fake: FakeVault, mount: str, version: int) -> None:
    fake.mount(mount, version)
    fake.write(mount, "common/test_key", value="default")
    fake.write(mount, "common/array_key", value='["a", "b", "c"]')
    fake.write(mount, "common/hash_key", value='{"a": 1, "b": 2, "c": 3}')
    fake.write(mount, "common/multiple_values_key", a=1, b=2, c=3)
    fake.write(mount, "common/values_key", value=123, a=1, b=2, c=3)
    fake.write(mount, "common/broken_json_key", value="[,")
    fake.write(mount, "common/confined_vault_key", value="find_me")
    fake.write(mount, "common/stripped_key", value="regexed_key")
    fake.write(
        mount,
        "common/complex_structure_key",
        hash={"a": 1},
        array=[1, 2],
        hash_with_array={"a": [1, 2]},
        array_with_hash=[{"a": 1}, {"b": 2}],
    )


@pytest.fixture(params=[1, 2], ids=["kv-v1", "kv-v2"])
def seeded_vault(request, vault):
    """FakeVault with the standard test secrets on a KV v1 or KV v2 mount."""
    mount = "puppet" if request.param == 1 else "puppetv2"
    seed(vault, mount, request.param)
    vault.mount_name = mount
    return vault


@pytest.fixture
def vault_options(seeded_vault) -> dict[str, Any]:
    return {
        "address": VAULT_ADDRESS,
        "token": ROOT_TOKEN,
        "mounts": {seeded_vault.mount_name: ["common"]},
    }


@pytest.fixture
def context() -> SimpleLookupContext:
    return SimpleLookupContext(environ={})


@pytest.fixture
def backend() -> VaultLookupBackend:
    """Backend with an empty environment."""
    return VaultLookupBackend(environ={})
