"""
Host runtime for a single staking pool.

This module plays the part of the ledger/transaction runtime around the pure
kernel in `locked_staking.core.staking`:
- it owns the committed `PoolState`, the `TokenLedger` and a clock,
- it runs every operation all-or-nothing: the kernel step and the token
  transfers it requests are computed against copies, and only committed when
  both succeed,
- it serializes operations (one at a time per runtime instance),
- it records emitted events and logs committed / rejected operations.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..core.staking import (
    REWARD_CUSTODY,
    Action,
    ActionParams,
    Effect,
    PoolState,
    StakingError,
    initialize,
    is_custody_account,
    position_custody,
    step_or_raise,
    view_current_rewards,
    view_reward_runway,
    view_unallocated_rewards,
)
from ..state.balances import TokenLedger
from .config import PoolConfig
from .pool_snapshot import PoolSnapshot, snapshot_from_state

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


@dataclass(frozen=True)
class PoolTxResult:
    ok: bool
    effect: Optional[Effect] = None
    error: Optional[str] = None


class StakingPoolRuntime:
    """Committed pool state plus the token ledger it settles against."""

    def __init__(self, state: PoolState, ledger: TokenLedger, *, clock: Clock = system_clock):
        if ledger.token != state.settings.token:
            raise ValueError(f"ledger token {ledger.token!r} != pool token {state.settings.token!r}")
        self._state = state
        self._ledger = ledger
        self._clock = clock
        self._events: List[Effect] = []

    # -- Construction --------------------------------------------------------

    @classmethod
    def initialize(
        cls,
        administrator: str,
        token: str,
        *,
        withdrawal_delay_seconds: int = 0,
        reward_rate_yearly_numerator: int = 0,
        ledger: Optional[TokenLedger] = None,
        clock: Clock = system_clock,
    ) -> "StakingPoolRuntime":
        result = initialize(
            administrator,
            token,
            withdrawal_delay_seconds,
            reward_rate_yearly_numerator,
            clock(),
        )
        runtime = cls(result.state, ledger if ledger is not None else TokenLedger(token), clock=clock)
        runtime._record(result.effect)
        return runtime

    @classmethod
    def from_config(cls, config: PoolConfig, *, clock: Clock = system_clock) -> "StakingPoolRuntime":
        return cls.initialize(
            config.administrator,
            config.token,
            withdrawal_delay_seconds=config.withdrawal_delay_seconds,
            reward_rate_yearly_numerator=config.reward_rate_yearly_numerator,
            ledger=TokenLedger(config.token, dict(config.balances)),
            clock=clock,
        )

    # -- Accessors -----------------------------------------------------------

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def ledger(self) -> TokenLedger:
        """A copy of the token ledger; mutate balances through `fund()`."""
        return self._ledger.copy()

    @property
    def events(self) -> tuple[Effect, ...]:
        return tuple(self._events)

    def balance_of(self, account: str) -> int:
        return self._ledger.get(account)

    def fund(self, account: str, amount: int) -> None:
        """Credit tokens to a wallet (outside the pool's accounting).

        Raises:
            ValueError: ``account`` is a custody account; reward custody is
                funded through `add_rewards()` only.
        """
        if is_custody_account(account):
            raise ValueError(f"cannot fund custody account {account!r} directly")
        self._ledger.credit(account, amount)

    def snapshot(self) -> PoolSnapshot:
        return snapshot_from_state(self._state)

    def custody_matches_state(self) -> bool:
        """True when every custody balance equals what the pool state says it holds."""
        expected = {REWARD_CUSTODY: self._state.reward_custody}
        for owner, user in self._state.positions.items():
            expected[position_custody(owner)] = user.stake_amount + user.withdrawal_request_amount
        held = {
            account: amount
            for account, amount in self._ledger.get_all_balances().items()
            if is_custody_account(account)
        }
        return held == {account: amount for account, amount in expected.items() if amount}

    # -- Execution -----------------------------------------------------------

    def _record(self, effect: Effect) -> None:
        self._events.append(effect)

    def execute(self, params: ActionParams) -> Effect:
        """Run one operation atomically and return its event.

        Raises:
            StakingError: the typed failure; state and ledger are unchanged.
        """
        try:
            result = step_or_raise(self._state, params)
            ledger = self._ledger.copy()
            ledger.apply(result.effect.transfers)
        except StakingError as exc:
            logger.warning("%s by %s rejected: %s (%s)", params.action.value, params.caller, exc.code, exc)
            raise

        self._state = result.state
        self._ledger = ledger
        self._record(result.effect)
        logger.info(
            "%s by %s committed at %s (total_staked=%s)",
            result.effect.event.value,
            params.caller,
            params.now,
            result.effect.total_staked,
        )
        return result.effect

    def try_execute(self, params: ActionParams) -> PoolTxResult:
        try:
            return PoolTxResult(ok=True, effect=self.execute(params))
        except StakingError as exc:
            return PoolTxResult(ok=False, error=exc.code)

    def _params(self, action: Action, caller: str, **kwargs) -> ActionParams:
        return ActionParams(action=action, caller=caller, now=self._clock(), **kwargs)

    # -- Participant operations ----------------------------------------------

    def stake(self, caller: str, amount: int) -> Effect:
        return self.execute(self._params(Action.STAKE, caller, amount=amount))

    def request_withdrawal(self, caller: str) -> Effect:
        return self.execute(self._params(Action.REQUEST_WITHDRAWAL, caller))

    def withdraw(self, caller: str) -> Effect:
        return self.execute(self._params(Action.WITHDRAW, caller))

    def withdraw_and_forfeit_rewards(self, caller: str) -> Effect:
        return self.execute(self._params(Action.WITHDRAW_AND_FORFEIT_REWARDS, caller))

    # -- Administrator operations --------------------------------------------

    def configure_reward_ratio(self, caller: str, reward_rate_yearly_numerator: int) -> Effect:
        return self.execute(
            self._params(
                Action.CONFIGURE_REWARD_RATIO,
                caller,
                reward_rate_yearly_numerator=reward_rate_yearly_numerator,
            )
        )

    def configure_withdrawal_delay(self, caller: str, withdrawal_delay_seconds: int) -> Effect:
        return self.execute(
            self._params(
                Action.CONFIGURE_WITHDRAWAL_DELAY,
                caller,
                withdrawal_delay_seconds=withdrawal_delay_seconds,
            )
        )

    def add_rewards(self, caller: str, amount: int) -> Effect:
        return self.execute(self._params(Action.ADD_REWARDS, caller, amount=amount))

    def initiate_ownership_transfer(self, caller: str, candidate: str) -> Effect:
        return self.execute(self._params(Action.INITIATE_OWNERSHIP_TRANSFER, caller, candidate=candidate))

    def finalize_ownership_transfer(self, caller: str) -> Effect:
        return self.execute(self._params(Action.FINALIZE_OWNERSHIP_TRANSFER, caller))

    # -- Views ---------------------------------------------------------------

    def current_rewards(self, owner: str) -> int:
        result = view_current_rewards(self._state, owner, self._clock())
        self._record(result.effect)
        logger.debug(
            "rewards for %s: captured=%s uncaptured=%s",
            owner,
            result.effect.captured_reward,
            result.effect.uncaptured_reward,
        )
        return result.value

    def unallocated_rewards(self) -> int:
        result = view_unallocated_rewards(self._state, self._clock())
        self._record(result.effect)
        return result.value

    def reward_runway(self) -> int:
        result = view_reward_runway(self._state, self._clock())
        self._record(result.effect)
        return result.value
