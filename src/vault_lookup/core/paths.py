"""
Candidate storage path construction.

KV v1 mounts store secrets at ``<mount>/<prefix>/<key>``; KV v2 mounts put
them under ``<mount>/data/<prefix>/<key>``.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

KV_V1 = 1
KV_V2 = 2


@dataclass(frozen=True)
class CandidatePath:
    """One concrete storage path to probe for a key."""

    mount: str
    prefix: str
    kv_version: int
    key: str  # Original key, used for confinement and diagnostics
    processed_key: str  # Key after strip_from_keys, used in the path

    @property
    def path(self) -> str:
        parts = [self.mount.strip("/")]
        if self.kv_version == KV_V2:
            parts.append("data")
        parts.append(self.prefix.strip("/"))
        parts.append(self.processed_key.strip("/"))
        return "/".join(part for part in parts if part)


def build_candidate_paths(
    mounts: Mapping[str, list[str]],
    key: str,
    processed_key: str,
    detect_version: Callable[[str], int | None],
) -> Iterator[CandidatePath]:
    """Yield candidate paths in mount order, then prefix order.

    The engine version of a mount is looked up once, and only when the first
    of its candidates is requested, so a hit on an earlier mount never probes
    later ones.

    Args:
        mounts: Mount name to ordered prefix list
        key: The raw lookup key
        processed_key: The key after stripping
        detect_version: Returns the KV version of a mount, or None if unknown
    """
    for mount, prefixes in mounts.items():
        if not prefixes:
            logger.debug(f"Mount '{mount}' has no prefixes, skipping")
            continue

        version = detect_version(mount) or KV_V1
        for prefix in prefixes:
            yield CandidatePath(
                mount=mount,
                prefix=prefix,
                kv_version=version,
                key=key,
                processed_key=processed_key,
            )
