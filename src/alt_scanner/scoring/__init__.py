"""Factor scoring and composite ranking."""

from .accumulation import analyze_accumulation
from .config import FactorWeights, RankerConfig, StrategyCriteria, StrategyProfile, STRATEGY_PROFILES, get_profile
from .dex import DexAnalysis, dex_score, enhanced_dex_analysis
from .flow import flow_score
from .models import AccumulationResult, FactorResult, NotRanked, ScoreBreakdown, TimingResult
from .ranker import CompositeRanker
from .timing import analyze_timing

__all__ = [
    "analyze_accumulation",
    "analyze_timing",
    "dex_score",
    "enhanced_dex_analysis",
    "flow_score",
    "DexAnalysis",
    "FactorWeights",
    "RankerConfig",
    "StrategyCriteria",
    "StrategyProfile",
    "STRATEGY_PROFILES",
    "get_profile",
    "AccumulationResult",
    "FactorResult",
    "NotRanked",
    "ScoreBreakdown",
    "TimingResult",
    "CompositeRanker",
]
