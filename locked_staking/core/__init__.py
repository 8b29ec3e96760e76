"""
Core pool algorithms
"""

from .staking import (
    PoolState,
    StepResult,
    initial_state,
    step,
    step_or_raise,
)

__all__ = [
    "PoolState",
    "StepResult",
    "initial_state",
    "step",
    "step_or_raise",
]
