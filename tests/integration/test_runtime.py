from __future__ import annotations

import logging

import pytest

from locked_staking.core.staking import (
    REWARD_CUSTODY,
    Action,
    ActionParams,
    Event,
    InsufficientBalance,
    InsufficientRewards,
    Unauthorized,
    WithdrawalDelayNotMet,
    initial_state,
    position_custody,
)
from locked_staking.integration import PoolConfig, StakingPoolRuntime, state_from_snapshot
from locked_staking.state.balances import TokenLedger

ADMIN = "admin"
ALICE = "alice"
BOB = "bob"
TOKEN = "STAKE"
T0 = 1_700_000_000
DELAY = 5 * 86_400
RATE_8PCT = 80_000_000_000
UNIT = 10**12


class FakeClock:
    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def _runtime(clock: FakeClock) -> StakingPoolRuntime:
    return StakingPoolRuntime.initialize(
        ADMIN,
        TOKEN,
        withdrawal_delay_seconds=DELAY,
        reward_rate_yearly_numerator=RATE_8PCT,
        ledger=TokenLedger(TOKEN, {ADMIN: 10**9, ALICE: 10 * UNIT}),
        clock=clock,
    )


def test_initialize_records_event() -> None:
    rt = _runtime(FakeClock(T0))
    assert [e.event for e in rt.events] == [Event.INITIALIZED]
    assert rt.state.stats.last_update_time == T0
    assert rt.state.settings.reward_rate_per_second_numerator == 2536


def test_full_lifecycle_moves_tokens() -> None:
    clock = FakeClock(T0)
    rt = _runtime(clock)

    rt.stake(ALICE, UNIT)
    rt.add_rewards(ADMIN, 10**8)
    assert rt.balance_of(position_custody(ALICE)) == UNIT
    assert rt.balance_of(REWARD_CUSTODY) == 10**8

    clock.advance(1000)
    assert rt.current_rewards(ALICE) == 2_536_000
    rt.request_withdrawal(ALICE)

    clock.advance(DELAY)
    effect = rt.withdraw(ALICE)
    assert effect.token_amount == UNIT
    assert effect.reward_amount == 2_536_000
    assert rt.balance_of(ALICE) == 10 * UNIT + 2_536_000
    assert rt.balance_of(position_custody(ALICE)) == 0
    assert rt.balance_of(REWARD_CUSTODY) == 10**8 - 2_536_000
    assert rt.custody_matches_state()

    assert [e.event for e in rt.events] == [
        Event.INITIALIZED,
        Event.STAKED,
        Event.REWARDS_ADDED,
        Event.CURRENT_REWARDS_VIEWED,
        Event.WITHDRAWAL_REQUESTED,
        Event.WITHDRAWN,
    ]


def test_forfeit_keeps_reward_in_custody() -> None:
    clock = FakeClock(T0)
    rt = _runtime(clock)
    rt.stake(ALICE, UNIT)
    clock.advance(1000)
    rt.request_withdrawal(ALICE)
    clock.advance(DELAY)

    # Unfunded pool: full withdraw fails, forfeit still returns principal.
    with pytest.raises(InsufficientRewards):
        rt.withdraw(ALICE)
    effect = rt.withdraw_and_forfeit_rewards(ALICE)
    assert effect.forfeited_reward_amount == 2_536_000
    assert rt.balance_of(ALICE) == 10 * UNIT
    assert rt.custody_matches_state()


def test_failed_transfer_rolls_back(caplog: pytest.LogCaptureFixture) -> None:
    rt = _runtime(FakeClock(T0))
    before_state = rt.state
    before_events = rt.events

    with caplog.at_level(logging.WARNING, logger="locked_staking.integration.runtime"):
        with pytest.raises(InsufficientBalance):
            rt.stake(BOB, 1)

    assert rt.state == before_state
    assert rt.events == before_events
    assert rt.balance_of(position_custody(BOB)) == 0
    assert "stake by bob rejected: InsufficientBalance" in caplog.text


def test_kernel_rejection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    clock = FakeClock(T0)
    rt = _runtime(clock)
    rt.stake(ALICE, 10)
    rt.request_withdrawal(ALICE)
    with caplog.at_level(logging.WARNING, logger="locked_staking.integration.runtime"):
        with pytest.raises(WithdrawalDelayNotMet):
            rt.withdraw(ALICE)
    assert "WithdrawalDelayNotMet" in caplog.text


def test_try_execute_reports_code() -> None:
    rt = _runtime(FakeClock(T0))
    res = rt.try_execute(ActionParams(Action.ADD_REWARDS, ALICE, T0, amount=1))
    assert res.ok is False
    assert res.error == "Unauthorized"
    assert res.effect is None

    ok = rt.try_execute(ActionParams(Action.ADD_REWARDS, ADMIN, T0, amount=1))
    assert ok.ok is True
    assert ok.effect.event == Event.REWARDS_ADDED


def test_ownership_hand_off() -> None:
    rt = _runtime(FakeClock(T0))
    rt.initiate_ownership_transfer(ADMIN, BOB)
    effect = rt.finalize_ownership_transfer(BOB)
    assert effect.old_administrator == ADMIN
    assert effect.new_administrator == BOB
    with pytest.raises(Unauthorized):
        rt.configure_withdrawal_delay(ADMIN, 0)
    rt.configure_withdrawal_delay(BOB, 0)
    rt.configure_reward_ratio(BOB, 0)
    assert rt.state.settings.withdrawal_delay_seconds == 0
    assert rt.state.settings.reward_rate_per_second_numerator == 0


def test_health_views() -> None:
    clock = FakeClock(T0)
    rt = _runtime(clock)
    rt.stake(ALICE, UNIT)
    rt.add_rewards(ADMIN, 10**8)
    clock.advance(1000)
    assert rt.unallocated_rewards() == 97_464_000
    assert rt.reward_runway() == 38_432
    assert rt.events[-1].event == Event.REWARD_RUNWAY_VIEWED


def test_ledger_accessor_is_a_copy() -> None:
    rt = _runtime(FakeClock(T0))
    rt.ledger.credit(BOB, 5)
    assert rt.balance_of(BOB) == 0
    rt.fund(BOB, 5)
    assert rt.balance_of(BOB) == 5


@pytest.mark.parametrize("account", [REWARD_CUSTODY, position_custody(ALICE)])
def test_fund_refuses_custody_accounts(account: str) -> None:
    rt = _runtime(FakeClock(T0))
    with pytest.raises(ValueError, match="custody"):
        rt.fund(account, 1)
    assert rt.balance_of(account) == 0
    assert rt.custody_matches_state()


def test_reward_custody_funded_only_through_add_rewards() -> None:
    clock = FakeClock(T0)
    rt = _runtime(clock)
    rt.stake(ALICE, UNIT)
    clock.advance(1000)
    rt.request_withdrawal(ALICE)
    clock.advance(DELAY)
    with pytest.raises(InsufficientRewards):
        rt.withdraw(ALICE)

    rt.add_rewards(ADMIN, 2_536_000)
    assert rt.state.reward_custody == rt.balance_of(REWARD_CUSTODY) == 2_536_000
    rt.withdraw(ALICE)
    assert rt.custody_matches_state()


def test_custody_audit_detects_stray_custody_balance() -> None:
    ledger = TokenLedger(TOKEN, {position_custody(BOB): 3})
    rt = StakingPoolRuntime(initial_state(ADMIN, TOKEN, 0, 0, T0), ledger, clock=FakeClock(T0))
    assert not rt.custody_matches_state()


def test_token_mismatch() -> None:
    with pytest.raises(ValueError):
        StakingPoolRuntime(initial_state(ADMIN, TOKEN, 0, 0, T0), TokenLedger("OTHER"))


def test_from_config_seeds_balances() -> None:
    cfg = PoolConfig(
        administrator=ADMIN,
        token=TOKEN,
        withdrawal_delay_seconds=DELAY,
        reward_rate_yearly_numerator=RATE_8PCT,
        balances={ALICE: 7},
    )
    rt = StakingPoolRuntime.from_config(cfg, clock=FakeClock(T0))
    assert rt.balance_of(ALICE) == 7
    assert rt.state.settings.withdrawal_delay_seconds == DELAY


def test_snapshot_restores_state() -> None:
    clock = FakeClock(T0)
    rt = _runtime(clock)
    rt.stake(ALICE, UNIT)
    clock.advance(10)
    rt.request_withdrawal(ALICE)
    snap = rt.snapshot()
    assert state_from_snapshot(snap.data) == rt.state
