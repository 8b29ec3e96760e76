"""
Host integration layer: configuration, snapshots and the pool runtime
"""

from .config import PoolConfig, config_from_mapping, load_pool_config
from .pool_snapshot import PoolSnapshot, snapshot_from_state, state_from_snapshot
from .runtime import PoolTxResult, StakingPoolRuntime, system_clock

__all__ = [
    "PoolConfig",
    "config_from_mapping",
    "load_pool_config",
    "PoolSnapshot",
    "snapshot_from_state",
    "state_from_snapshot",
    "PoolTxResult",
    "StakingPoolRuntime",
    "system_clock",
]
