from ppdiff.models.profile import ProfileTotals


def reconcile(
    reference_total: float | None,
    weighted_live_sum: float,
    weighted_local_sum: float,
) -> ProfileTotals:
    """
    Fold the part of the reference total not explained by the tracked plays
    into the local total, so both totals compare on equal footing.

    The bonus is whatever the reference total carries beyond the weighted live
    sum (plays outside the tracked set, playcount bonus, rounding on the
    server). It is an approximation and is deliberately not clamped: a negative
    bonus is reported as-is.
    """
    reference = float(reference_total or 0.0)
    bonus = reference - weighted_live_sum
    adjusted_local_total = weighted_local_sum + bonus

    return ProfileTotals(
        reference_total=reference,
        weighted_live_sum=weighted_live_sum,
        weighted_local_sum=weighted_local_sum,
        bonus=bonus,
        adjusted_local_total=adjusted_local_total,
        delta=adjusted_local_total - reference,
    )
