"""Exception types for the locked-staking engine.

Used by ``step_or_raise()`` and the views for callers that prefer exceptions
over ``StepResult`` inspection. Each class carries the stable error ``code``
of the rejection it represents.
"""

from __future__ import annotations

from .types import Rejection


class StakingError(Exception):
    """Base class for every typed pool failure."""

    code: str = "StakingError"


# -- Authorization -----------------------------------------------------------

class Unauthorized(StakingError):
    """Caller is not the pool administrator."""

    code = Rejection.UNAUTHORIZED.value


class UnauthorizedOwnershipTransfer(StakingError):
    """Caller is not the pending administrator."""

    code = Rejection.UNAUTHORIZED_OWNERSHIP_TRANSFER.value


# -- Input validation --------------------------------------------------------

class InvalidAmount(StakingError):
    """Zero or out-of-range parameter."""

    code = Rejection.INVALID_AMOUNT.value


# -- State preconditions -----------------------------------------------------

class NoStakeToWithdraw(StakingError):
    code = Rejection.NO_STAKE_TO_WITHDRAW.value


class NoWithdrawalRequest(StakingError):
    code = Rejection.NO_WITHDRAWAL_REQUEST.value


class AccountNotInitialized(StakingError):
    code = Rejection.ACCOUNT_NOT_INITIALIZED.value


class WithdrawalDelayNotMet(StakingError):
    code = Rejection.WITHDRAWAL_DELAY_NOT_MET.value


class ClockRegression(StakingError):
    """``now`` is earlier than the last settlement."""

    code = Rejection.CLOCK_REGRESSION.value


# -- Resources ---------------------------------------------------------------

class InsufficientRewards(StakingError):
    """Reward custody cannot cover the queued reward."""

    code = Rejection.INSUFFICIENT_REWARDS.value


class MathOverflow(StakingError):
    """A stored field would leave its fixed-width range."""

    code = Rejection.MATH_OVERFLOW.value


class InsufficientBalance(StakingError):
    """Raised by the token ledger when a transfer over-draws an account."""

    code = "InsufficientBalance"


class StakingInvariantError(StakingError):
    """Raised when a post-state violates one or more invariants."""

    code = "InvariantViolation"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


_BY_REJECTION: dict[Rejection, type[StakingError]] = {
    Rejection.UNAUTHORIZED: Unauthorized,
    Rejection.UNAUTHORIZED_OWNERSHIP_TRANSFER: UnauthorizedOwnershipTransfer,
    Rejection.INVALID_AMOUNT: InvalidAmount,
    Rejection.NO_STAKE_TO_WITHDRAW: NoStakeToWithdraw,
    Rejection.NO_WITHDRAWAL_REQUEST: NoWithdrawalRequest,
    Rejection.ACCOUNT_NOT_INITIALIZED: AccountNotInitialized,
    Rejection.WITHDRAWAL_DELAY_NOT_MET: WithdrawalDelayNotMet,
    Rejection.INSUFFICIENT_REWARDS: InsufficientRewards,
    Rejection.CLOCK_REGRESSION: ClockRegression,
    Rejection.MATH_OVERFLOW: MathOverflow,
}


def error_for(rejection: Rejection, message: str | None = None) -> StakingError:
    """Build the exception matching ``rejection``."""
    return _BY_REJECTION[rejection](message or rejection.value)
