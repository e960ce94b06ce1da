"""Core enumerations for the scanner."""

from enum import Enum


class Category(str, Enum):
    """Composite score buckets."""
    HOT = "HOT"
    STRONG = "STRONG"
    PROMISING = "PROMISING"
    INTERESTING = "INTERESTING"
    NEUTRAL = "NEUTRAL"
    WEAK = "WEAK"


class AccumulationCategory(str, Enum):
    """Accumulation strength buckets."""
    STRONG = "STRONG_ACCUMULATION"
    MODERATE = "MODERATE_ACCUMULATION"
    WEAK = "WEAK_ACCUMULATION"
    NONE = "NO_ACCUMULATION"


class TimingAction(str, Enum):
    """Entry timing recommendations."""
    BUY_NOW = "BUY NOW"
    GOOD_TO_BUY = "GOOD TO BUY"
    WAIT_FOR_BETTER = "WAIT FOR BETTER"
    AVOID_NOW = "AVOID NOW"


class ActionDecision(str, Enum):
    """Action signal outcomes."""
    BUY_NOW = "BUY_NOW"
    BUY = "BUY"
    WAIT_FOR_DIP = "WAIT_FOR_DIP"
    WAIT_BETTER_TIMING = "WAIT_BETTER_TIMING"
    SKIP_HIGH_RISK = "SKIP_HIGH_RISK"
    SKIP_WEAK = "SKIP_WEAK"
    WATCH = "WATCH"


class Confidence(str, Enum):
    """Confidence levels."""
    VERY_HIGH = "VERY_HIGH"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RiskRewardDecision(str, Enum):
    """Risk-reward recommendation tiers."""
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    POOR = "POOR"
    NEUTRAL = "NEUTRAL"


class Strategy(str, Enum):
    """Named strategy profiles."""
    MOMENTUM = "MOMENTUM"
    VALUE = "VALUE"
    BALANCED = "BALANCED"
    HIGH_CAP_GEMS = "HIGH_CAP_GEMS"


class VolumeCharacter(str, Enum):
    """Dominant trade-size character of recent volume."""
    WHALE_DOMINATED = "whale_dominated"
    MIXED = "mixed"
    RETAIL_DOMINATED = "retail_dominated"
    BALANCED = "balanced"


class TrendDirection(str, Enum):
    """Direction of a macro trend (e.g. ETH/BTC)."""
    STRONG_UP = "STRONG_UP"
    UP = "UP"
    SIDEWAYS = "SIDEWAYS"
    DOWN = "DOWN"
    STRONG_DOWN = "STRONG_DOWN"


class MarketPhase(str, Enum):
    """Market phases keyed on BTC dominance."""
    BITCOIN_WINTER = "BITCOIN_WINTER"
    BITCOIN_SEASON = "BITCOIN_SEASON"
    BTC_FAVORED = "BTC_FAVORED"
    TRANSITION = "TRANSITION"
    BALANCED = "BALANCED"
    ALT_SEASON = "ALT_SEASON"
    PEAK_EUPHORIA = "PEAK_EUPHORIA"


class RiskLevel(str, Enum):
    """Risk levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
