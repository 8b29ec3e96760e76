"""`staking`: pure-Python locked-staking reward pool kernel.

- deterministic, integer-only transitions (floor rounding, 1e12 fixed point),
- immutable state (frozen dataclasses),
- fail-closed guards with typed rejections and invariant checks.

Public API:
- `initial_state(...) -> PoolState` / `initialize(...) -> StepResult`
- `step(state, params) -> StepResult`
- `step_or_raise(state, params) -> StepResult` (raises on rejection)
- `view_current_rewards`, `view_unallocated_rewards`, `view_reward_runway`
"""

from .engine import step, step_or_raise
from .errors import (
    AccountNotInitialized,
    ClockRegression,
    InsufficientBalance,
    InsufficientRewards,
    InvalidAmount,
    MathOverflow,
    NoStakeToWithdraw,
    NoWithdrawalRequest,
    StakingError,
    StakingInvariantError,
    Unauthorized,
    UnauthorizedOwnershipTransfer,
    WithdrawalDelayNotMet,
)
from .state import initial_state, initialize, state_from_dict, state_to_dict
from .types import (
    CUSTODY_PREFIX,
    REWARD_CUSTODY,
    Action,
    ActionParams,
    Effect,
    Event,
    PoolState,
    Rejection,
    Settings,
    Stats,
    StepResult,
    Transfer,
    UserInfo,
    ViewResult,
    is_custody_account,
    position_custody,
)
from .views import view_current_rewards, view_reward_runway, view_unallocated_rewards

__all__ = [
    "step",
    "step_or_raise",
    "initial_state",
    "initialize",
    "state_from_dict",
    "state_to_dict",
    "view_current_rewards",
    "view_unallocated_rewards",
    "view_reward_runway",
    "REWARD_CUSTODY",
    "CUSTODY_PREFIX",
    "is_custody_account",
    "position_custody",
    "Action",
    "ActionParams",
    "Effect",
    "Event",
    "PoolState",
    "Rejection",
    "Settings",
    "Stats",
    "StepResult",
    "Transfer",
    "UserInfo",
    "ViewResult",
    "StakingError",
    "Unauthorized",
    "UnauthorizedOwnershipTransfer",
    "InvalidAmount",
    "NoStakeToWithdraw",
    "NoWithdrawalRequest",
    "AccountNotInitialized",
    "WithdrawalDelayNotMet",
    "InsufficientRewards",
    "InsufficientBalance",
    "ClockRegression",
    "MathOverflow",
    "StakingInvariantError",
]
