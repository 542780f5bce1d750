from collections.abc import Sequence

from ppdiff.core.constants import PP_DECAY
from ppdiff.models.play import PlayReport, PlayResult
from ppdiff.models.profile import ProfileTotals
from ppdiff.services.profile.aggregation import weighted_sum_sorted
from ppdiff.services.profile.ranking import compare_rankings, order_by_live, order_by_local
from ppdiff.services.profile.reconcile import reconcile


def evaluate_profile(
    reference_total: float | None,
    plays: Sequence[PlayResult],
    decay: float = PP_DECAY,
) -> tuple[ProfileTotals, list[PlayReport]]:
    """
    Aggregate a fully evaluated play set and compare it with the reference total.

    Pure function: both orderings are computed once and shared between the
    weighted sums and the rank comparison, so a play's reported rank is the
    rank its weight was taken from.
    """
    live_order = order_by_live(plays)
    local_order = order_by_local(plays)

    weighted_live = weighted_sum_sorted((play.live_pp for play in live_order), decay)
    weighted_local = weighted_sum_sorted((play.local_pp for play in local_order), decay)

    totals = reconcile(reference_total, weighted_live, weighted_local)
    reports = compare_rankings(plays, live_order=live_order, local_order=local_order, decay=decay)
    return totals, reports
