"""State construction and serialization for the locked-staking pool.

`initial_state()` returns a freshly initialized pool (zeroed accumulators,
``last_update_time = now``); `initialize()` wraps it in a ``StepResult``
carrying the ``Initialized`` event.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Mapping

from .errors import InvalidAmount
from .math import MAX_WITHDRAWAL_DELAY_SECONDS, fits_u32, fits_u64, per_second_rate
from .types import Effect, Event, Identity, PoolState, Settings, Stats, StepResult, UserInfo

# Auto-derived from the record definitions (single source of truth).
SETTINGS_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Settings))
STATS_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Stats))
USER_INFO_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(UserInfo))

_IDENTITY_FIELDS = frozenset({"administrator", "token", "pending_administrator", "owner"})


def initial_state(
    administrator: Identity,
    token: Identity,
    withdrawal_delay_seconds: int,
    reward_rate_yearly_numerator: int,
    now: int,
) -> PoolState:
    """Build a new pool.

    Raises:
        InvalidAmount: empty identity, delay outside ``[0, 31 days]``, or a
            rate/timestamp outside its storage width.
    """
    if not administrator or not token:
        raise InvalidAmount("administrator and token must be non-empty")
    if not (0 <= withdrawal_delay_seconds <= MAX_WITHDRAWAL_DELAY_SECONDS):
        raise InvalidAmount(f"withdrawal delay out of range: {withdrawal_delay_seconds}")
    if not fits_u64(reward_rate_yearly_numerator):
        raise InvalidAmount(f"reward rate out of range: {reward_rate_yearly_numerator}")
    if not fits_u32(now):
        raise InvalidAmount(f"timestamp out of range: {now}")

    return PoolState(
        settings=Settings(
            administrator=administrator,
            token=token,
            withdrawal_delay_seconds=withdrawal_delay_seconds,
            reward_rate_per_second_numerator=per_second_rate(reward_rate_yearly_numerator),
        ),
        stats=Stats(last_update_time=now),
    )


def initialize(
    administrator: Identity,
    token: Identity,
    withdrawal_delay_seconds: int,
    reward_rate_yearly_numerator: int,
    now: int,
) -> StepResult:
    state = initial_state(administrator, token, withdrawal_delay_seconds, reward_rate_yearly_numerator, now)
    effect = Effect(
        event=Event.INITIALIZED,
        actor=administrator,
        timestamp=now,
        new_administrator=administrator,
        withdrawal_delay_seconds=withdrawal_delay_seconds,
        reward_rate_yearly_numerator=reward_rate_yearly_numerator,
        reward_rate_per_second_numerator=state.settings.reward_rate_per_second_numerator,
    )
    return StepResult(accepted=True, state=state, effect=effect)


# -- Serialization -----------------------------------------------------------

def _record_to_dict(record: Any, names: tuple[str, ...]) -> dict[str, int | str | None]:
    return {name: getattr(record, name) for name in names}


def _record_from_dict(cls: type, names: tuple[str, ...], d: Mapping[str, Any]) -> Any:
    kwargs: dict[str, Any] = {}
    for name in names:
        val = d[name]
        if name in _IDENTITY_FIELDS:
            if val is not None and not isinstance(val, str):
                raise TypeError(f"{cls.__name__}.{name} must be str|None, got {type(val).__name__}")
            kwargs[name] = val
        elif isinstance(val, int) and not isinstance(val, bool):
            kwargs[name] = int(val)  # normalize int subclasses
        else:
            raise TypeError(f"{cls.__name__}.{name} must be int, got {type(val).__name__}")
    return cls(**kwargs)


def state_to_dict(state: PoolState) -> dict[str, Any]:
    """Serialize a PoolState to plain dicts/lists; positions sorted by owner."""
    return {
        "settings": _record_to_dict(state.settings, SETTINGS_FIELDS),
        "stats": _record_to_dict(state.stats, STATS_FIELDS),
        "positions": [
            _record_to_dict(state.positions[owner], USER_INFO_FIELDS)
            for owner in sorted(state.positions)
        ],
        "reward_custody": state.reward_custody,
    }


def state_from_dict(d: Mapping[str, Any]) -> PoolState:
    """Deserialize a dict to a PoolState. Raises KeyError on missing fields."""
    positions: dict[Identity, UserInfo] = {}
    for raw in d["positions"]:
        user = _record_from_dict(UserInfo, USER_INFO_FIELDS, raw)
        if user.owner in positions:
            raise ValueError(f"duplicate position for {user.owner!r}")
        positions[user.owner] = user

    reward_custody = d["reward_custody"]
    if not isinstance(reward_custody, int) or isinstance(reward_custody, bool):
        raise TypeError("reward_custody must be int")

    return PoolState(
        settings=_record_from_dict(Settings, SETTINGS_FIELDS, d["settings"]),
        stats=_record_from_dict(Stats, STATS_FIELDS, d["stats"]),
        positions=positions,
        reward_custody=int(reward_custody),
    )
