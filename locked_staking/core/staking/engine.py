"""Dispatch-table engine for the locked-staking pool.

``step(state, params)`` is the single entry point for mutating actions. It:

1. Dispatches to the correct guard / update / effect functions.
2. Rejects with the guard's typed reason when the guard fails.
3. Rejects with ``MathOverflow`` when the post-state leaves fixed-width storage.
4. Checks pool and acting-position invariants on the post-state.
5. Returns a ``StepResult`` (accepted or rejected with reason).

The input state is never modified, so a rejected step leaves every record
exactly as it was.
"""

from __future__ import annotations

from typing import Callable

from .effects import (
    effect_add_rewards,
    effect_configure_reward_ratio,
    effect_configure_withdrawal_delay,
    effect_finalize_ownership_transfer,
    effect_initiate_ownership_transfer,
    effect_request_withdrawal,
    effect_stake,
    effect_withdraw,
    effect_withdraw_and_forfeit_rewards,
)
from .errors import MathOverflow, StakingInvariantError, error_for
from .guards import (
    guard_add_rewards,
    guard_configure_reward_ratio,
    guard_configure_withdrawal_delay,
    guard_finalize_ownership_transfer,
    guard_initiate_ownership_transfer,
    guard_request_withdrawal,
    guard_stake,
    guard_withdraw,
    guard_withdraw_and_forfeit_rewards,
)
from .invariants import check_all, check_position, width_violations
from .types import Action, ActionParams, Effect, PoolState, Rejection, StepResult
from .updates import (
    apply_add_rewards,
    apply_configure_reward_ratio,
    apply_configure_withdrawal_delay,
    apply_finalize_ownership_transfer,
    apply_initiate_ownership_transfer,
    apply_request_withdrawal,
    apply_stake,
    apply_withdraw,
    apply_withdraw_and_forfeit_rewards,
)

GuardFn = Callable[[PoolState, ActionParams], "Rejection | None"]
UpdateFn = Callable[[PoolState, ActionParams], PoolState]
EffectFn = Callable[[PoolState, PoolState, ActionParams], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.STAKE: (
        guard_stake, apply_stake, effect_stake,
    ),
    Action.REQUEST_WITHDRAWAL: (
        guard_request_withdrawal, apply_request_withdrawal, effect_request_withdrawal,
    ),
    Action.WITHDRAW: (
        guard_withdraw, apply_withdraw, effect_withdraw,
    ),
    Action.WITHDRAW_AND_FORFEIT_REWARDS: (
        guard_withdraw_and_forfeit_rewards,
        apply_withdraw_and_forfeit_rewards,
        effect_withdraw_and_forfeit_rewards,
    ),
    Action.CONFIGURE_REWARD_RATIO: (
        guard_configure_reward_ratio, apply_configure_reward_ratio, effect_configure_reward_ratio,
    ),
    Action.CONFIGURE_WITHDRAWAL_DELAY: (
        guard_configure_withdrawal_delay,
        apply_configure_withdrawal_delay,
        effect_configure_withdrawal_delay,
    ),
    Action.ADD_REWARDS: (
        guard_add_rewards, apply_add_rewards, effect_add_rewards,
    ),
    Action.INITIATE_OWNERSHIP_TRANSFER: (
        guard_initiate_ownership_transfer,
        apply_initiate_ownership_transfer,
        effect_initiate_ownership_transfer,
    ),
    Action.FINALIZE_OWNERSHIP_TRANSFER: (
        guard_finalize_ownership_transfer,
        apply_finalize_ownership_transfer,
        effect_finalize_ownership_transfer,
    ),
}


def step(state: PoolState, params: ActionParams) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a typed ``rejection``.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        raise ValueError(f"unknown action: {params.action!r}")

    guard_fn, update_fn, effect_fn = entry

    rejection = guard_fn(state, params)
    if rejection is not None:
        return StepResult(accepted=False, rejection=rejection)

    new_state = update_fn(state, params)

    overflow = width_violations(new_state, params.caller)
    if overflow:
        return StepResult(accepted=False, rejection=Rejection.MATH_OVERFLOW, violations=tuple(overflow))

    violations = check_all(new_state)
    user = new_state.position(params.caller)
    if user is not None:
        violations += check_position(new_state.stats, user)
    if violations:
        return StepResult(accepted=False, violations=tuple(violations))

    effect = effect_fn(state, new_state, params)
    return StepResult(accepted=True, state=new_state, effect=effect)


def step_or_raise(state: PoolState, params: ActionParams) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        StakingError: the subclass matching the rejection (``Unauthorized``,
            ``InvalidAmount``, ``WithdrawalDelayNotMet``, ...).
        MathOverflow: Post-state leaves fixed-width storage.
        StakingInvariantError: Post-state violates one or more invariants.
    """
    result = step(state, params)
    if result.accepted:
        return result

    if result.rejection is Rejection.MATH_OVERFLOW:
        raise MathOverflow(f"overflow in {', '.join(result.violations)}")
    if result.rejection is None:
        raise StakingInvariantError(list(result.violations))
    raise error_for(result.rejection, f"{params.action.value}: {result.rejection.value}")
