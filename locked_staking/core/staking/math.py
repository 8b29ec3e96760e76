"""Pure fixed-point arithmetic for the locked-staking pool.

Every function is stateless and operates on plain Python ints.

Rates are numerators over ``PRECISION`` (1e12). The annual rate is truncated
once, when it is configured, to a per-second numerator; accrual afterwards is
linear in elapsed seconds at that floored rate. All divisions use ``//``
(floor), as in unsigned fixed-width integer arithmetic.
"""

from __future__ import annotations

PRECISION: int = 1_000_000_000_000  # 1e12
SECONDS_PER_DAY: int = 24 * 60 * 60
SECONDS_PER_YEAR: int = 365 * SECONDS_PER_DAY  # 31_536_000
MAX_WITHDRAWAL_DELAY_DAYS: int = 31
MAX_WITHDRAWAL_DELAY_SECONDS: int = MAX_WITHDRAWAL_DELAY_DAYS * SECONDS_PER_DAY

# Fixed-width storage bounds
U32_MAX: int = 2**32 - 1
U64_MAX: int = 2**64 - 1

# Sentinel returned by the runway view for "never runs out".
INFINITE_RUNWAY: int = U64_MAX


# -- Rate conversion ---------------------------------------------------------

def per_second_rate(reward_rate_yearly_numerator: int) -> int:
    """Annual rate numerator -> per-second-per-unit numerator (floored).

    ``80_000_000_000`` (8% a year at 1e12 scale) becomes ``2536``.
    """
    return reward_rate_yearly_numerator // SECONDS_PER_YEAR


def days_to_seconds(days: int) -> int:
    return days * SECONDS_PER_DAY


# -- Accrual -----------------------------------------------------------------

def reward_increment(rate_per_second_numerator: int, elapsed_seconds: int) -> int:
    """Growth of the reward-per-unit accumulator over ``elapsed_seconds``."""
    return rate_per_second_numerator * elapsed_seconds


def promised_increment(total_staked: int, reward_increment_numerator: int) -> int:
    """Reward liability created by one accumulator step: ``staked * delta / 1e12``."""
    return (total_staked * reward_increment_numerator) // PRECISION


def uncaptured_rewards(
    stake_amount: int,
    reward_per_unit_stored_numerator: int,
    reward_per_unit_paid_numerator: int,
) -> int:
    """Reward a position earned since its last checkpoint."""
    diff = reward_per_unit_stored_numerator - reward_per_unit_paid_numerator
    return (stake_amount * diff) // PRECISION


# -- Health ------------------------------------------------------------------

def burn_per_second(total_staked: int, rate_per_second_numerator: int) -> int:
    """Reward units promised per second at the current stake level (floored)."""
    return (total_staked * rate_per_second_numerator) // PRECISION


def runway_seconds(unallocated: int, total_staked: int, rate_per_second_numerator: int) -> int:
    """Seconds until funded reward is exhausted, or ``INFINITE_RUNWAY``.

    A deficit clamps to 0. A burn rate that floors to 0 never exhausts the
    funding, and neither does a runway beyond the u32 timestamp range.
    """
    burn = burn_per_second(total_staked, rate_per_second_numerator)
    if burn == 0:
        return INFINITE_RUNWAY
    available = unallocated if unallocated > 0 else 0
    runway = available // burn
    if runway > U32_MAX:
        return INFINITE_RUNWAY
    return runway


def fits_u64(value: int) -> bool:
    return 0 <= value <= U64_MAX


def fits_u32(value: int) -> bool:
    return 0 <= value <= U32_MAX
