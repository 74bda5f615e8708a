"""
Confidence Scorer

    score = volatility_factor * coverage_factor * buffer_factor

Each factor has a floor, so a plan is never declared 0% reliable - only
"low reliability".
"""

from adaptive_budget.engine.buffer import clamp


VOLATILITY_FLOOR = 0.3
COVERAGE_FLOOR = 0.2
BUFFER_FLOOR = 0.2
NEUTRAL_BUFFER_FACTOR = 0.5


def volatility_factor(volatility: float) -> float:
    return clamp(1.0 - volatility, VOLATILITY_FLOOR, 1.0)


def coverage_factor(days_with_data: int, coverage_days: int = 30) -> float:
    return clamp(days_with_data / coverage_days, COVERAGE_FLOOR, 1.0)


def buffer_factor(buffer_current: float, buffer_target: float) -> float:
    if buffer_target <= 0:
        return NEUTRAL_BUFFER_FACTOR
    return clamp(buffer_current / buffer_target, BUFFER_FLOOR, 1.0)


def compute_confidence_score(
    volatility: float,
    days_with_data: int,
    buffer_current: float,
    buffer_target: float,
    coverage_days: int = 30,
) -> float:
    """Plan reliability in (0, 1], rounded to 2 decimals."""
    score = (
        volatility_factor(volatility)
        * coverage_factor(days_with_data, coverage_days)
        * buffer_factor(buffer_current, buffer_target)
    )
    return round(score, 2)


def fallback_confidence_score() -> float:
    """Score of a plan built with no usable data: floors with a neutral buffer."""
    return round(VOLATILITY_FLOOR * COVERAGE_FLOOR * NEUTRAL_BUFFER_FACTOR, 2)
