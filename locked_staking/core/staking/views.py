"""Read-only health views.

Each view settles a *copy* of `Stats` to ``now`` and reads from it; nothing is
persisted. Results carry a diagnostic ``Effect`` for off-line observability.
"""

from __future__ import annotations

from .accrual import owed, settle
from .errors import AccountNotInitialized
from .math import runway_seconds
from .types import Effect, Event, Identity, PoolState, ViewResult


def view_current_rewards(state: PoolState, owner: Identity, now: int) -> ViewResult:
    """Captured plus uncaptured reward of ``owner``'s position at ``now``.

    Raises:
        AccountNotInitialized: ``owner`` never staked.
        ClockRegression: ``now`` precedes the last settlement.
    """
    user = state.position(owner)
    if user is None:
        raise AccountNotInitialized(f"no position for {owner!r}")
    stats = settle(state.settings, state.stats, now)
    uncaptured = owed(stats, user)
    total = user.captured_reward + uncaptured
    return ViewResult(
        value=total,
        effect=Effect(
            event=Event.CURRENT_REWARDS_VIEWED,
            actor=owner,
            timestamp=now,
            captured_reward=user.captured_reward,
            uncaptured_reward=uncaptured,
            total_reward=total,
            total_staked=stats.total_staked,
        ),
    )


def unallocated_rewards(state: PoolState, now: int) -> int:
    """Funded minus promised reward at ``now``; negative means a deficit."""
    stats = settle(state.settings, state.stats, now)
    return stats.total_reward_provided - stats.total_reward_promised


def view_unallocated_rewards(state: PoolState, now: int) -> ViewResult:
    value = unallocated_rewards(state, now)
    return ViewResult(
        value=value,
        effect=Effect(
            event=Event.UNALLOCATED_REWARDS_VIEWED,
            actor=state.settings.administrator,
            timestamp=now,
            unallocated_rewards=value,
            total_staked=state.stats.total_staked,
        ),
    )


def view_reward_runway(state: PoolState, now: int) -> ViewResult:
    """Seconds of funded reward left at the current burn rate.

    Returns ``INFINITE_RUNWAY`` when nothing is staked or the rate is zero.
    """
    unallocated = unallocated_rewards(state, now)
    runway = runway_seconds(
        unallocated,
        state.stats.total_staked,
        state.settings.reward_rate_per_second_numerator,
    )
    return ViewResult(
        value=runway,
        effect=Effect(
            event=Event.REWARD_RUNWAY_VIEWED,
            actor=state.settings.administrator,
            timestamp=now,
            available_rewards=max(unallocated, 0),
            runway_seconds=runway,
            total_staked=state.stats.total_staked,
        ),
    )
