"""State transition functions for the locked-staking engine.

One pure function per action. Each returns a new `PoolState` with the
action's updates applied.

Semantics:
- updates evaluate against the PRE-state (guards already passed),
- every accruing action settles `Stats` to ``params.now`` first,
- we implement updates via `dataclasses.replace()` on frozen dataclasses;
  `positions` is copied, never mutated in place.
"""

from __future__ import annotations

from dataclasses import replace

from .accrual import capture, settle
from .math import per_second_rate
from .types import ActionParams, PoolState, Stats, UserInfo


def _with(state: PoolState, stats: Stats, user: UserInfo | None = None, **changes) -> PoolState:
    if user is not None:
        changes["positions"] = {**state.positions, user.owner: user}
    return replace(state, stats=stats, **changes)


def _clear_request(user: UserInfo) -> UserInfo:
    return replace(
        user,
        withdrawal_request_time=0,
        withdrawal_request_amount=0,
        withdrawal_request_reward_amount=0,
    )


# -- Participant actions -----------------------------------------------------

def apply_stake(state: PoolState, params: ActionParams) -> PoolState:
    stats = settle(state.settings, state.stats, params.now)
    user = state.position(params.caller)
    if user is None:
        # New participant starts at the current accumulator: no back-dated reward.
        user = UserInfo(
            owner=params.caller,
            reward_per_unit_paid_numerator=stats.reward_per_unit_stored_numerator,
        )
    else:
        user = capture(stats, user)

    user = replace(
        user,
        stake_amount=user.stake_amount + params.amount,
        staked_at=params.now if user.stake_amount == 0 else user.staked_at,
    )
    stats = replace(stats, total_staked=stats.total_staked + params.amount)
    return _with(state, stats, user)


def apply_request_withdrawal(state: PoolState, params: ActionParams) -> PoolState:
    stats = settle(state.settings, state.stats, params.now)
    user = capture(stats, state.positions[params.caller])

    principal = user.stake_amount
    reward = user.captured_reward
    user = replace(
        user,
        stake_amount=0,
        staked_at=0,
        captured_reward=0,
        withdrawal_request_time=params.now,
        withdrawal_request_amount=user.withdrawal_request_amount + principal,
        withdrawal_request_reward_amount=user.withdrawal_request_reward_amount + reward,
    )
    stats = replace(stats, total_staked=stats.total_staked - principal)
    return _with(state, stats, user)


def apply_withdraw(state: PoolState, params: ActionParams) -> PoolState:
    stats = settle(state.settings, state.stats, params.now)
    user = state.positions[params.caller]
    return _with(
        state,
        stats,
        _clear_request(user),
        reward_custody=state.reward_custody - user.withdrawal_request_reward_amount,
    )


def apply_withdraw_and_forfeit_rewards(state: PoolState, params: ActionParams) -> PoolState:
    # Forfeited reward stays in reward custody and is not re-credited anywhere.
    stats = settle(state.settings, state.stats, params.now)
    return _with(state, stats, _clear_request(state.positions[params.caller]))


# -- Administrator actions ---------------------------------------------------

def apply_configure_reward_ratio(state: PoolState, params: ActionParams) -> PoolState:
    # Settle at the old rate so past accrual is never repriced.
    stats = settle(state.settings, state.stats, params.now)
    settings = replace(
        state.settings,
        reward_rate_per_second_numerator=per_second_rate(params.reward_rate_yearly_numerator),
    )
    return _with(state, stats, settings=settings)


def apply_configure_withdrawal_delay(state: PoolState, params: ActionParams) -> PoolState:
    stats = settle(state.settings, state.stats, params.now)
    settings = replace(state.settings, withdrawal_delay_seconds=params.withdrawal_delay_seconds)
    return _with(state, stats, settings=settings)


def apply_add_rewards(state: PoolState, params: ActionParams) -> PoolState:
    stats = settle(state.settings, state.stats, params.now)
    stats = replace(stats, total_reward_provided=stats.total_reward_provided + params.amount)
    return _with(state, stats, reward_custody=state.reward_custody + params.amount)


def apply_initiate_ownership_transfer(state: PoolState, params: ActionParams) -> PoolState:
    return replace(state, settings=replace(state.settings, pending_administrator=params.candidate))


def apply_finalize_ownership_transfer(state: PoolState, params: ActionParams) -> PoolState:
    settings = replace(state.settings, administrator=params.caller, pending_administrator=None)
    return replace(state, settings=settings)
