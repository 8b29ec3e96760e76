"""Guard functions for the locked-staking engine.

One pure function per action. Each returns ``None`` when the action is
allowed in the given PRE-state with the given parameters, otherwise the
single `Rejection` that blocks it.

Check order: authorization, input validation, clock, state preconditions,
resources.
"""

from __future__ import annotations

from .math import MAX_WITHDRAWAL_DELAY_SECONDS, fits_u64
from .types import ActionParams, PoolState, Rejection


def _guard_admin(state: PoolState, params: ActionParams) -> Rejection | None:
    if params.caller != state.settings.administrator:
        return Rejection.UNAUTHORIZED
    return None


def _guard_clock(state: PoolState, params: ActionParams) -> Rejection | None:
    if params.now < state.stats.last_update_time:
        return Rejection.CLOCK_REGRESSION
    return None


def _guard_positive_amount(amount: int) -> Rejection | None:
    if amount <= 0 or not fits_u64(amount):
        return Rejection.INVALID_AMOUNT
    return None


def _guard_withdrawable(state: PoolState, params: ActionParams) -> Rejection | None:
    """Shared by both withdraw flavours: request exists and delay elapsed."""
    user = state.position(params.caller)
    if user is None:
        return Rejection.ACCOUNT_NOT_INITIALIZED
    if user.withdrawal_request_amount == 0:
        return Rejection.NO_WITHDRAWAL_REQUEST
    if params.now - user.withdrawal_request_time < state.settings.withdrawal_delay_seconds:
        return Rejection.WITHDRAWAL_DELAY_NOT_MET
    return None


# -- Participant actions -----------------------------------------------------

def guard_stake(state: PoolState, params: ActionParams) -> Rejection | None:
    return _guard_positive_amount(params.amount) or _guard_clock(state, params)


def guard_request_withdrawal(state: PoolState, params: ActionParams) -> Rejection | None:
    err = _guard_clock(state, params)
    if err is not None:
        return err
    user = state.position(params.caller)
    if user is None:
        return Rejection.ACCOUNT_NOT_INITIALIZED
    if user.stake_amount == 0:
        return Rejection.NO_STAKE_TO_WITHDRAW
    return None


def guard_withdraw(state: PoolState, params: ActionParams) -> Rejection | None:
    err = _guard_clock(state, params) or _guard_withdrawable(state, params)
    if err is not None:
        return err
    user = state.positions[params.caller]
    if state.reward_custody < user.withdrawal_request_reward_amount:
        return Rejection.INSUFFICIENT_REWARDS
    return None


def guard_withdraw_and_forfeit_rewards(state: PoolState, params: ActionParams) -> Rejection | None:
    return _guard_clock(state, params) or _guard_withdrawable(state, params)


# -- Administrator actions ---------------------------------------------------

def guard_configure_reward_ratio(state: PoolState, params: ActionParams) -> Rejection | None:
    err = _guard_admin(state, params)
    if err is not None:
        return err
    if not fits_u64(params.reward_rate_yearly_numerator):
        return Rejection.INVALID_AMOUNT
    return _guard_clock(state, params)


def guard_configure_withdrawal_delay(state: PoolState, params: ActionParams) -> Rejection | None:
    err = _guard_admin(state, params)
    if err is not None:
        return err
    if not (0 <= params.withdrawal_delay_seconds <= MAX_WITHDRAWAL_DELAY_SECONDS):
        return Rejection.INVALID_AMOUNT
    return _guard_clock(state, params)


def guard_add_rewards(state: PoolState, params: ActionParams) -> Rejection | None:
    return (
        _guard_admin(state, params)
        or _guard_positive_amount(params.amount)
        or _guard_clock(state, params)
    )


def guard_initiate_ownership_transfer(state: PoolState, params: ActionParams) -> Rejection | None:
    err = _guard_admin(state, params)
    if err is not None:
        return err
    if not params.candidate:
        return Rejection.INVALID_AMOUNT
    return None


def guard_finalize_ownership_transfer(state: PoolState, params: ActionParams) -> Rejection | None:
    pending = state.settings.pending_administrator
    if pending is None or params.caller != pending:
        return Rejection.UNAUTHORIZED_OWNERSHIP_TRANSFER
    return None
