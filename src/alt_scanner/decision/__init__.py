"""Decision layer on top of composite scores."""

from .action_signal import ActionSignal, ActionSignalEngine, DecisionFactors
from .risk_reward import MoveEstimate, RiskRewardEstimator, RiskRewardResult

__all__ = [
    "ActionSignal",
    "ActionSignalEngine",
    "DecisionFactors",
    "MoveEstimate",
    "RiskRewardEstimator",
    "RiskRewardResult",
]
