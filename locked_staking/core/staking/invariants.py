"""Invariant checkers for the locked-staking engine.

Each function returns True when the invariant holds. Three registries:

- `INVARIANT_REGISTRY`: pool-level checks, constant time, run on every step;
- `POSITION_INVARIANT_REGISTRY`: per-position checks, run on the acting position;
- `check_ledger()`: full audit across all positions (linear), for snapshots/tests.

`width_violations()` reports stored fields that left their fixed-width range.
"""

from __future__ import annotations

from typing import Callable

from .math import MAX_WITHDRAWAL_DELAY_SECONDS, fits_u32, fits_u64
from .types import PoolState, Stats, UserInfo


# -- Pool-level --------------------------------------------------------------

def inv_administrator_set(s: PoolState) -> bool:
    return bool(s.settings.administrator)


def inv_pending_administrator_non_empty(s: PoolState) -> bool:
    return s.settings.pending_administrator is None or bool(s.settings.pending_administrator)


def inv_withdrawal_delay_in_range(s: PoolState) -> bool:
    return 0 <= s.settings.withdrawal_delay_seconds <= MAX_WITHDRAWAL_DELAY_SECONDS


def inv_reward_custody_nonneg(s: PoolState) -> bool:
    return s.reward_custody >= 0


def inv_reward_custody_within_provided(s: PoolState) -> bool:
    return s.reward_custody <= s.stats.total_reward_provided


INVARIANT_REGISTRY: dict[str, Callable[[PoolState], bool]] = {
    "inv_administrator_set": inv_administrator_set,
    "inv_pending_administrator_non_empty": inv_pending_administrator_non_empty,
    "inv_withdrawal_delay_in_range": inv_withdrawal_delay_in_range,
    "inv_reward_custody_nonneg": inv_reward_custody_nonneg,
    "inv_reward_custody_within_provided": inv_reward_custody_within_provided,
}


def check_all(state: PoolState) -> list[str]:
    """Return list of violated pool-level invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]


# -- Per-position ------------------------------------------------------------

def inv_staked_at_zero_when_empty(stats: Stats, u: UserInfo) -> bool:
    if u.stake_amount != 0:
        return True
    return u.staked_at == 0


def inv_request_zeroed_when_idle(stats: Stats, u: UserInfo) -> bool:
    if u.withdrawal_request_amount != 0:
        return True
    return u.withdrawal_request_time == 0 and u.withdrawal_request_reward_amount == 0


def inv_checkpoint_not_ahead(stats: Stats, u: UserInfo) -> bool:
    return u.reward_per_unit_paid_numerator <= stats.reward_per_unit_stored_numerator


def inv_stake_within_total(stats: Stats, u: UserInfo) -> bool:
    return u.stake_amount <= stats.total_staked


POSITION_INVARIANT_REGISTRY: dict[str, Callable[[Stats, UserInfo], bool]] = {
    "inv_staked_at_zero_when_empty": inv_staked_at_zero_when_empty,
    "inv_request_zeroed_when_idle": inv_request_zeroed_when_idle,
    "inv_checkpoint_not_ahead": inv_checkpoint_not_ahead,
    "inv_stake_within_total": inv_stake_within_total,
}


def check_position(stats: Stats, user: UserInfo) -> list[str]:
    """Return list of violated per-position invariant IDs for ``user``."""
    return [
        inv_id
        for inv_id, check_fn in POSITION_INVARIANT_REGISTRY.items()
        if not check_fn(stats, user)
    ]


# -- Full audit --------------------------------------------------------------

def check_ledger(state: PoolState) -> list[str]:
    """Pool-level, every-position and aggregate checks over the whole state."""
    violations = check_all(state)
    for owner in sorted(state.positions):
        violations.extend(f"{inv_id}:{owner}" for inv_id in check_position(state.stats, state.positions[owner]))
    if sum(u.stake_amount for u in state.positions.values()) != state.stats.total_staked:
        violations.append("inv_total_staked_matches_positions")
    return violations


# -- Fixed-width storage -----------------------------------------------------

_U32_STATS = ("last_update_time",)
_U64_STATS = (
    "reward_per_unit_stored_numerator",
    "total_staked",
    "total_reward_promised",
    "total_reward_provided",
)
_U32_USER = ("staked_at", "withdrawal_request_time")
_U64_USER = (
    "stake_amount",
    "reward_per_unit_paid_numerator",
    "captured_reward",
    "withdrawal_request_amount",
    "withdrawal_request_reward_amount",
)


def width_violations(state: PoolState, owner: str | None = None) -> list[str]:
    """Names of stored fields outside u32/u64 (pool records plus one position)."""
    bad = [f"stats.{n}" for n in _U32_STATS if not fits_u32(getattr(state.stats, n))]
    bad += [f"stats.{n}" for n in _U64_STATS if not fits_u64(getattr(state.stats, n))]
    if not fits_u64(state.settings.reward_rate_per_second_numerator):
        bad.append("settings.reward_rate_per_second_numerator")
    if not fits_u64(state.reward_custody):
        bad.append("reward_custody")
    user = state.position(owner) if owner is not None else None
    if user is not None:
        bad += [f"user.{n}" for n in _U32_USER if not fits_u32(getattr(user, n))]
        bad += [f"user.{n}" for n in _U64_USER if not fits_u64(getattr(user, n))]
    return bad
