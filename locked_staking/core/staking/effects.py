"""Effect functions for the locked-staking engine.

One pure function per action. Each computes the ``Effect`` from the PRE- and
POST-state: amounts that an action zeroes (the withdrawal request) are only
visible in the pre-state, running totals only in the post-state.
"""

from __future__ import annotations

from .types import (
    REWARD_CUSTODY,
    ActionParams,
    Effect,
    Event,
    PoolState,
    Transfer,
    position_custody,
)


def _transfers(*items: Transfer) -> tuple[Transfer, ...]:
    return tuple(t for t in items if t.amount > 0)


def effect_stake(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    user = post.positions[params.caller]
    return Effect(
        event=Event.STAKED,
        actor=params.caller,
        timestamp=params.now,
        amount=params.amount,
        total_user_staked=user.stake_amount,
        total_staked=post.stats.total_staked,
        transfers=_transfers(
            Transfer(params.caller, position_custody(params.caller), params.amount),
        ),
    )


def effect_request_withdrawal(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    before = pre.positions[params.caller]
    after = post.positions[params.caller]
    return Effect(
        event=Event.WITHDRAWAL_REQUESTED,
        actor=params.caller,
        timestamp=params.now,
        token_amount=after.withdrawal_request_amount - before.withdrawal_request_amount,
        reward_amount=after.withdrawal_request_reward_amount - before.withdrawal_request_reward_amount,
        total_token_amount=after.withdrawal_request_amount,
        total_reward_amount=after.withdrawal_request_reward_amount,
        withdrawal_request_time=after.withdrawal_request_time,
        total_staked=post.stats.total_staked,
    )


def effect_withdraw(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    before = pre.positions[params.caller]
    return Effect(
        event=Event.WITHDRAWN,
        actor=params.caller,
        timestamp=params.now,
        token_amount=before.withdrawal_request_amount,
        reward_amount=before.withdrawal_request_reward_amount,
        withdrawal_request_time=before.withdrawal_request_time,
        total_staked=post.stats.total_staked,
        transfers=_transfers(
            Transfer(position_custody(params.caller), params.caller, before.withdrawal_request_amount),
            Transfer(REWARD_CUSTODY, params.caller, before.withdrawal_request_reward_amount),
        ),
    )


def effect_withdraw_and_forfeit_rewards(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    before = pre.positions[params.caller]
    return Effect(
        event=Event.WITHDRAWN_AND_FORFEITED_REWARDS,
        actor=params.caller,
        timestamp=params.now,
        token_amount=before.withdrawal_request_amount,
        forfeited_reward_amount=before.withdrawal_request_reward_amount,
        withdrawal_request_time=before.withdrawal_request_time,
        total_staked=post.stats.total_staked,
        transfers=_transfers(
            Transfer(position_custody(params.caller), params.caller, before.withdrawal_request_amount),
        ),
    )


def effect_configure_reward_ratio(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.REWARD_RATIO_CONFIGURED,
        actor=params.caller,
        timestamp=params.now,
        reward_rate_yearly_numerator=params.reward_rate_yearly_numerator,
        reward_rate_per_second_numerator=post.settings.reward_rate_per_second_numerator,
        total_staked=post.stats.total_staked,
    )


def effect_configure_withdrawal_delay(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.WITHDRAWAL_DELAY_CONFIGURED,
        actor=params.caller,
        timestamp=params.now,
        withdrawal_delay_seconds=post.settings.withdrawal_delay_seconds,
        total_staked=post.stats.total_staked,
    )


def effect_add_rewards(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.REWARDS_ADDED,
        actor=params.caller,
        timestamp=params.now,
        amount=params.amount,
        total_staked=post.stats.total_staked,
        transfers=_transfers(Transfer(params.caller, REWARD_CUSTODY, params.amount)),
    )


def effect_initiate_ownership_transfer(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.OWNERSHIP_TRANSFER_INITIATED,
        actor=params.caller,
        timestamp=params.now,
        old_administrator=post.settings.administrator,
        new_administrator=post.settings.pending_administrator,
        total_staked=post.stats.total_staked,
    )


def effect_finalize_ownership_transfer(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.OWNERSHIP_TRANSFER_FINALIZED,
        actor=params.caller,
        timestamp=params.now,
        old_administrator=pre.settings.administrator,
        new_administrator=post.settings.administrator,
        total_staked=post.stats.total_staked,
    )
