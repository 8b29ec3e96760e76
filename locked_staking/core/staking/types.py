"""Data types for the locked-staking engine.

All types are frozen dataclasses (immutable).

Units/conventions:
- `*_numerator` values are fixed-point over `math.PRECISION` (1e12).
- `*_time` / `*_at` values are unix seconds (u32); 0 means "unset".
- amounts are integer token base units (u64).
- identities (`administrator`, `owner`, ...) are opaque non-empty strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Mapping

Identity = str

# Custody accounts in the host token ledger. Only pool steps move tokens in
# or out of them.
CUSTODY_PREFIX: str = "custody:"
REWARD_CUSTODY: str = CUSTODY_PREFIX + "rewards"


def position_custody(owner: Identity) -> str:
    """Ledger account holding one participant's staked principal."""
    return f"{CUSTODY_PREFIX}position:{owner}"


def is_custody_account(account: str) -> bool:
    return account.startswith(CUSTODY_PREFIX)


@unique
class Action(Enum):
    """One member per mutating operation."""
    STAKE = "stake"
    REQUEST_WITHDRAWAL = "request_withdrawal"
    WITHDRAW = "withdraw"
    WITHDRAW_AND_FORFEIT_REWARDS = "withdraw_and_forfeit_rewards"
    CONFIGURE_REWARD_RATIO = "configure_reward_ratio"
    CONFIGURE_WITHDRAWAL_DELAY = "configure_withdrawal_delay"
    ADD_REWARDS = "add_rewards"
    INITIATE_OWNERSHIP_TRANSFER = "initiate_ownership_transfer"
    FINALIZE_OWNERSHIP_TRANSFER = "finalize_ownership_transfer"


@unique
class Event(Enum):
    """One member per observable event."""
    INITIALIZED = "Initialized"
    STAKED = "Staked"
    WITHDRAWAL_REQUESTED = "WithdrawalRequested"
    WITHDRAWN = "Withdrawn"
    WITHDRAWN_AND_FORFEITED_REWARDS = "WithdrawnAndForfeitedRewards"
    REWARD_RATIO_CONFIGURED = "RewardRatioConfigured"
    WITHDRAWAL_DELAY_CONFIGURED = "WithdrawalDelayConfigured"
    REWARDS_ADDED = "RewardsAdded"
    OWNERSHIP_TRANSFER_INITIATED = "OwnershipTransferInitiated"
    OWNERSHIP_TRANSFER_FINALIZED = "OwnershipTransferFinalized"
    CURRENT_REWARDS_VIEWED = "CurrentRewardsViewed"
    UNALLOCATED_REWARDS_VIEWED = "UnallocatedRewardsViewed"
    REWARD_RUNWAY_VIEWED = "RewardRunwayViewed"


@unique
class Rejection(Enum):
    """Typed failure reasons; values are the stable error codes."""
    UNAUTHORIZED = "Unauthorized"
    UNAUTHORIZED_OWNERSHIP_TRANSFER = "UnauthorizedOwnershipTransfer"
    INVALID_AMOUNT = "InvalidAmount"
    NO_STAKE_TO_WITHDRAW = "NoStakeToWithdraw"
    NO_WITHDRAWAL_REQUEST = "NoWithdrawalRequest"
    ACCOUNT_NOT_INITIALIZED = "AccountNotInitialized"
    WITHDRAWAL_DELAY_NOT_MET = "WithdrawalDelayNotMet"
    INSUFFICIENT_REWARDS = "InsufficientRewards"
    CLOCK_REGRESSION = "ClockRegression"
    MATH_OVERFLOW = "MathOverflow"


@dataclass(frozen=True)
class Settings:
    """Deployment-wide configuration and administrator authority."""

    administrator: Identity
    token: Identity
    withdrawal_delay_seconds: int = 0
    reward_rate_per_second_numerator: int = 0
    # Non-None only while a two-phase hand-off is in flight.
    pending_administrator: Identity | None = None


@dataclass(frozen=True)
class Stats:
    """Protocol-wide reward accounting."""

    reward_per_unit_stored_numerator: int = 0
    last_update_time: int = 0
    total_staked: int = 0
    total_reward_promised: int = 0
    total_reward_provided: int = 0


@dataclass(frozen=True)
class UserInfo:
    """One participant's position."""

    owner: Identity
    stake_amount: int = 0
    staked_at: int = 0
    reward_per_unit_paid_numerator: int = 0
    captured_reward: int = 0
    withdrawal_request_time: int = 0
    withdrawal_request_amount: int = 0
    withdrawal_request_reward_amount: int = 0


@dataclass(frozen=True)
class PoolState:
    """Complete pool state: the three record types plus reward custody.

    `reward_custody` is the protocol reward custody balance (funded
    reward not yet paid out, including forfeited reward). It decides
    `InsufficientRewards`; the host keeps its ledger account equal to it.
    """

    settings: Settings
    stats: Stats = Stats()
    positions: Mapping[Identity, UserInfo] = field(default_factory=dict)
    reward_custody: int = 0

    def position(self, owner: Identity) -> UserInfo | None:
        return self.positions.get(owner)


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0/None."""

    action: Action
    caller: Identity
    now: int
    amount: int = 0                        # stake / add_rewards
    reward_rate_yearly_numerator: int = 0  # configure_reward_ratio
    withdrawal_delay_seconds: int = 0      # configure_withdrawal_delay
    candidate: Identity | None = None      # initiate_ownership_transfer


@dataclass(frozen=True)
class Transfer:
    """A token movement the host must perform for a committed step."""

    source: str
    destination: str
    amount: int


@dataclass(frozen=True)
class Effect:
    """Observable event emitted after a successful step or view."""

    event: Event
    actor: Identity
    timestamp: int = 0
    amount: int = 0
    total_user_staked: int = 0
    total_staked: int = 0
    # withdrawal request / withdraw
    token_amount: int = 0
    reward_amount: int = 0
    total_token_amount: int = 0
    total_reward_amount: int = 0
    withdrawal_request_time: int = 0
    forfeited_reward_amount: int = 0
    # configuration
    reward_rate_yearly_numerator: int = 0
    reward_rate_per_second_numerator: int = 0
    withdrawal_delay_seconds: int = 0
    # administration
    old_administrator: Identity | None = None
    new_administrator: Identity | None = None
    # views
    captured_reward: int = 0
    uncaptured_reward: int = 0
    total_reward: int = 0
    unallocated_rewards: int = 0
    available_rewards: int = 0
    runway_seconds: int = 0
    transfers: tuple[Transfer, ...] = ()


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: PoolState | None = None
    effect: Effect | None = None
    rejection: Rejection | None = None
    violations: tuple[str, ...] = ()


@dataclass(frozen=True)
class ViewResult:
    """Result of a read-only query: the value plus its diagnostic event."""

    value: int
    effect: Effect
