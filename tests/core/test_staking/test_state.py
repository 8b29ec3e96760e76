"""Tests for locked_staking/core/staking/state.py — state construction and serialization."""

import pytest

from locked_staking.core.staking import (
    Action,
    ActionParams,
    Event,
    InvalidAmount,
    PoolState,
    initial_state,
    initialize,
    state_from_dict,
    state_to_dict,
    step,
)
from locked_staking.core.staking.math import MAX_WITHDRAWAL_DELAY_SECONDS, U32_MAX, U64_MAX
from locked_staking.core.staking.state import SETTINGS_FIELDS, STATS_FIELDS, USER_INFO_FIELDS

T0 = 1_700_000_000


class TestInitialState:
    def test_returns_pool_state(self):
        assert isinstance(initial_state("admin", "STAKE", 0, 0, T0), PoolState)

    def test_default_values(self):
        s = initial_state("admin", "STAKE", 432_000, 80_000_000_000, T0)
        assert s.settings.administrator == "admin"
        assert s.settings.token == "STAKE"
        assert s.settings.withdrawal_delay_seconds == 432_000
        assert s.settings.reward_rate_per_second_numerator == 2536
        assert s.settings.pending_administrator is None
        assert s.stats.last_update_time == T0
        assert s.stats.reward_per_unit_stored_numerator == 0
        assert s.stats.total_staked == 0
        assert s.stats.total_reward_promised == 0
        assert s.stats.total_reward_provided == 0
        assert s.positions == {}
        assert s.reward_custody == 0

    def test_frozen(self):
        s = initial_state("admin", "STAKE", 0, 0, T0)
        with pytest.raises(AttributeError):
            s.reward_custody = 1  # type: ignore

    @pytest.mark.parametrize(
        "args",
        [
            ("", "STAKE", 0, 0, T0),
            ("admin", "", 0, 0, T0),
            ("admin", "STAKE", MAX_WITHDRAWAL_DELAY_SECONDS + 1, 0, T0),
            ("admin", "STAKE", -1, 0, T0),
            ("admin", "STAKE", 0, U64_MAX + 1, T0),
            ("admin", "STAKE", 0, 0, U32_MAX + 1),
        ],
    )
    def test_rejects_bad_parameters(self, args):
        with pytest.raises(InvalidAmount):
            initial_state(*args)


class TestInitialize:
    def test_emits_initialized(self):
        r = initialize("admin", "STAKE", 86_400, 80_000_000_000, T0)
        assert r.accepted
        assert r.effect.event == Event.INITIALIZED
        assert r.effect.actor == "admin"
        assert r.effect.timestamp == T0
        assert r.effect.withdrawal_delay_seconds == 86_400
        assert r.effect.reward_rate_yearly_numerator == 80_000_000_000
        assert r.effect.reward_rate_per_second_numerator == 2536
        assert r.state == initial_state("admin", "STAKE", 86_400, 80_000_000_000, T0)


class TestFieldNames:
    def test_counts(self):
        assert len(SETTINGS_FIELDS) == 5
        assert len(STATS_FIELDS) == 5
        assert len(USER_INFO_FIELDS) == 8

    def test_no_duplicates(self):
        assert len(set(USER_INFO_FIELDS)) == len(USER_INFO_FIELDS)


def _populated() -> PoolState:
    s = initial_state("admin", "STAKE", 0, 80_000_000_000, T0)
    for now, caller, action, kwargs in [
        (T0, "admin", Action.ADD_REWARDS, {"amount": 10**9}),
        (T0, "bob", Action.STAKE, {"amount": 300}),
        (T0 + 5, "alice", Action.STAKE, {"amount": 10**12}),
        (T0 + 50, "bob", Action.REQUEST_WITHDRAWAL, {}),
        (T0 + 60, "admin", Action.INITIATE_OWNERSHIP_TRANSFER, {"candidate": "carol"}),
    ]:
        r = step(s, ActionParams(action=action, caller=caller, now=now, **kwargs))
        assert r.accepted, r.rejection
        s = r.state
    return s


class TestRoundTrip:
    def test_initial_state_round_trip(self):
        s = initial_state("admin", "STAKE", 0, 0, T0)
        assert state_from_dict(state_to_dict(s)) == s

    def test_populated_round_trip(self):
        s = _populated()
        assert state_from_dict(state_to_dict(s)) == s

    def test_positions_sorted_by_owner(self):
        d = state_to_dict(_populated())
        assert [p["owner"] for p in d["positions"]] == ["alice", "bob"]

    def test_missing_field(self):
        d = state_to_dict(_populated())
        del d["stats"]["total_staked"]
        with pytest.raises(KeyError):
            state_from_dict(d)

    def test_bool_rejected(self):
        d = state_to_dict(_populated())
        d["stats"]["total_staked"] = True
        with pytest.raises(TypeError):
            state_from_dict(d)

    def test_identity_must_be_str(self):
        d = state_to_dict(_populated())
        d["settings"]["administrator"] = 7
        with pytest.raises(TypeError):
            state_from_dict(d)

    def test_duplicate_owner(self):
        d = state_to_dict(_populated())
        d["positions"].append(dict(d["positions"][0]))
        with pytest.raises(ValueError):
            state_from_dict(d)

    def test_reward_custody_type(self):
        d = state_to_dict(_populated())
        d["reward_custody"] = "10"
        with pytest.raises(TypeError):
            state_from_dict(d)
