"""
Pool state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / snapshot distribution.
- Round-trippable into the functional-core `PoolState` type.
- Explicit versioning for future formats.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..core.staking.invariants import check_ledger
from ..core.staking.state import state_from_dict, state_to_dict
from ..core.staking.types import PoolState
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex


POOL_SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Deterministic, versioned snapshot of `PoolState`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("pool_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("pool_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)


def snapshot_from_state(state: PoolState, *, version: int = POOL_SNAPSHOT_VERSION) -> PoolSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    data: Dict[str, Any] = {"version": int(version), **state_to_dict(state)}
    return PoolSnapshot(version=version, data=data)


def state_from_snapshot(snapshot: Mapping[str, Any], *, max_positions: int = 1_000_000) -> PoolState:
    """Decode and audit a snapshot.

    Raises:
        TypeError / KeyError: malformed document.
        ValueError: unsupported version, too many positions, or a state that
            fails the full ledger audit.
    """
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", POOL_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != POOL_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    positions = snapshot.get("positions")
    if not isinstance(positions, list):
        raise TypeError("snapshot.positions must be a list")
    if len(positions) > max_positions:
        raise ValueError(f"too many positions: {len(positions)} > {max_positions}")

    state = state_from_dict(snapshot)
    violations = check_ledger(state)
    if violations:
        raise ValueError(f"snapshot violates invariants: {', '.join(violations)}")
    return state
