from collections.abc import Iterable

from ppdiff.core.constants import PP_DECAY


def weight_for_rank(rank: int, decay: float = PP_DECAY) -> float:
    """Weight of the play at 0-based ``rank`` in a descending ordering."""
    return decay**rank


def weighted_sum(values: Iterable[float], decay: float = PP_DECAY) -> float:
    """
    Collapse per-play performance values into a single profile total.

    Values are sorted descending and the value at rank ``i`` contributes
    ``decay ** i`` of itself, so each additional play matters less than the
    one above it. Equal values keep their input order (stable sort).

    Args:
        values: Performance values, each >= 0, in any order
        decay: Geometric decay between successive ranks

    Returns:
        Weighted total; 0.0 for an empty input
    """
    return weighted_sum_sorted(sorted(values, reverse=True), decay)


def weighted_sum_sorted(ordered_values: Iterable[float], decay: float = PP_DECAY) -> float:
    """Weighted total of values that are already in descending order."""
    total = 0.0
    for rank, value in enumerate(ordered_values):
        total += weight_for_rank(rank, decay) * value
    return total
