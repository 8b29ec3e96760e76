"""Settlement of the global accumulator and lazy position reconciliation.

`settle()` advances `Stats` to ``now``; `capture()` pulls a position's
uncaptured reward against the settled accumulator and moves its checkpoint.
Every mutating action settles exactly once, before it touches a position.
"""

from __future__ import annotations

from dataclasses import replace

from .errors import ClockRegression
from .math import promised_increment, reward_increment, uncaptured_rewards
from .types import Settings, Stats, UserInfo


def settle(settings: Settings, stats: Stats, now: int) -> Stats:
    """Return ``stats`` accrued up to ``now``.

    While nothing is staked the accumulator is frozen; only the timestamp
    moves. Settling twice at the same ``now`` is a no-op.
    """
    elapsed = now - stats.last_update_time
    if elapsed < 0:
        raise ClockRegression(f"now={now} < last_update_time={stats.last_update_time}")
    if stats.total_staked == 0 or elapsed == 0:
        return replace(stats, last_update_time=now)

    delta = reward_increment(settings.reward_rate_per_second_numerator, elapsed)
    return replace(
        stats,
        reward_per_unit_stored_numerator=stats.reward_per_unit_stored_numerator + delta,
        total_reward_promised=stats.total_reward_promised + promised_increment(stats.total_staked, delta),
        last_update_time=now,
    )


def owed(stats: Stats, user: UserInfo) -> int:
    """Reward earned by ``user`` since its checkpoint, against settled ``stats``."""
    return uncaptured_rewards(
        user.stake_amount,
        stats.reward_per_unit_stored_numerator,
        user.reward_per_unit_paid_numerator,
    )


def capture(stats: Stats, user: UserInfo) -> UserInfo:
    """Fold the uncaptured reward into ``captured_reward`` and checkpoint."""
    return replace(
        user,
        captured_reward=user.captured_reward + owed(stats, user),
        reward_per_unit_paid_numerator=stats.reward_per_unit_stored_numerator,
    )
