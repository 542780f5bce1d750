from collections.abc import Sequence

from ppdiff.core.constants import PP_DECAY
from ppdiff.models.play import PlayReport, PlayResult
from ppdiff.services.profile.aggregation import weight_for_rank


def order_by_live(plays: Sequence[PlayResult]) -> list[PlayResult]:
    """Plays by live pp, highest first. Ties keep ingestion order."""
    return sorted(plays, key=lambda play: play.live_pp, reverse=True)


def order_by_local(plays: Sequence[PlayResult]) -> list[PlayResult]:
    """Plays by local pp, highest first. Ties keep ingestion order."""
    return sorted(plays, key=lambda play: play.local_pp, reverse=True)


def _positions(ordered: list[PlayResult]) -> dict[int, int]:
    # Keyed by object identity: two plays may share a beatmap and equal values
    return {id(play): position for position, play in enumerate(ordered)}


def compare_rankings(
    plays: Sequence[PlayResult],
    live_order: list[PlayResult] | None = None,
    local_order: list[PlayResult] | None = None,
    decay: float = PP_DECAY,
) -> list[PlayReport]:
    """
    Report how each play moves between the live and the local ordering.

    ``rank_shift`` is ``live_rank - local_rank``. Pre-computed orderings can be
    passed in so that the ranks reported here are the ones used for weighting.

    Returns:
        One report per play, in local order
    """
    live_order = order_by_live(plays) if live_order is None else live_order
    local_order = order_by_local(plays) if local_order is None else local_order
    live_positions = _positions(live_order)

    reports = []
    for local_rank, play in enumerate(local_order):
        live_rank = live_positions[id(play)]
        reports.append(
            PlayReport(
                **play.model_dump(),
                live_rank=live_rank,
                local_rank=local_rank,
                rank_shift=live_rank - local_rank,
                pp_change=play.local_pp - play.live_pp,
                weight=weight_for_rank(local_rank, decay),
            )
        )
    return reports
