"""
Pool deployment configuration.

A deployment is described by a small YAML document:

    pool:
      administrator: "admin"
      token: "STAKE"
      withdrawal_delay_days: 5
      reward_rate_yearly_numerator: 80000000000   # 8% a year at 1e12 scale

`withdrawal_delay_seconds` may be given instead of `withdrawal_delay_days`
(not both). An optional `balances` mapping seeds wallet balances in the host
ledger, which is convenient for simulations and tests; custody accounts
(`custody:*`) cannot be seeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from ..core.staking.math import MAX_WITHDRAWAL_DELAY_DAYS, MAX_WITHDRAWAL_DELAY_SECONDS, days_to_seconds
from ..core.staking.types import is_custody_account

logger = logging.getLogger(__name__)


def _require_str(value: Any, *, name: str, max_len: int = 512) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class PoolConfig:
    """Parameters needed to initialize a pool."""

    administrator: str
    token: str
    withdrawal_delay_seconds: int = 0
    reward_rate_yearly_numerator: int = 0
    balances: Dict[str, int] = field(default_factory=dict)


def config_from_mapping(obj: Mapping[str, Any]) -> PoolConfig:
    """Validate a parsed YAML/JSON document and build a `PoolConfig`."""
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")
    pool = obj.get("pool")
    if not isinstance(pool, Mapping):
        raise TypeError("config.pool must be a mapping")

    unknown = set(pool) - {
        "administrator",
        "token",
        "withdrawal_delay_days",
        "withdrawal_delay_seconds",
        "reward_rate_yearly_numerator",
    }
    if unknown:
        raise ValueError(f"unknown config.pool keys: {sorted(unknown)}")

    if "withdrawal_delay_days" in pool and "withdrawal_delay_seconds" in pool:
        raise ValueError("give withdrawal_delay_days or withdrawal_delay_seconds, not both")
    if "withdrawal_delay_days" in pool:
        days = _require_int(pool["withdrawal_delay_days"], name="pool.withdrawal_delay_days")
        if days > MAX_WITHDRAWAL_DELAY_DAYS:
            raise ValueError(f"pool.withdrawal_delay_days must be <= {MAX_WITHDRAWAL_DELAY_DAYS}")
        delay_seconds = days_to_seconds(days)
    else:
        delay_seconds = _require_int(pool.get("withdrawal_delay_seconds", 0), name="pool.withdrawal_delay_seconds")
        if delay_seconds > MAX_WITHDRAWAL_DELAY_SECONDS:
            raise ValueError(f"pool.withdrawal_delay_seconds must be <= {MAX_WITHDRAWAL_DELAY_SECONDS}")

    balances_raw = obj.get("balances") or {}
    if not isinstance(balances_raw, Mapping):
        raise TypeError("config.balances must be a mapping")
    custody = sorted(a for a in balances_raw if isinstance(a, str) and is_custody_account(a))
    if custody:
        raise ValueError(f"config.balances cannot seed custody accounts: {custody}")
    balances = {
        _require_str(account, name="balances key"): _require_int(amount, name=f"balances[{account}]")
        for account, amount in balances_raw.items()
    }

    return PoolConfig(
        administrator=_require_str(pool.get("administrator"), name="pool.administrator"),
        token=_require_str(pool.get("token"), name="pool.token"),
        withdrawal_delay_seconds=delay_seconds,
        reward_rate_yearly_numerator=_require_int(
            pool.get("reward_rate_yearly_numerator", 0), name="pool.reward_rate_yearly_numerator"
        ),
        balances=balances,
    )


def load_pool_config(path: str | Path) -> PoolConfig:
    """Read and validate a YAML deployment file."""
    path = Path(path)
    obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    config = config_from_mapping(obj)
    logger.info(
        "loaded pool config from %s: token=%s delay=%ss rate=%s",
        path,
        config.token,
        config.withdrawal_delay_seconds,
        config.reward_rate_yearly_numerator,
    )
    return config
