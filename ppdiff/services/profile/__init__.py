"""
Profile aggregation and comparison.

Pure engine (aggregation, reconciliation, ranking) plus the service that feeds
it fully evaluated plays.
"""

from ppdiff.services.profile.aggregation import weight_for_rank, weighted_sum
from ppdiff.services.profile.engine import evaluate_profile
from ppdiff.services.profile.ranking import compare_rankings
from ppdiff.services.profile.reconcile import reconcile
from ppdiff.services.profile.service import ProfileService

__all__ = [
    "weighted_sum",
    "weight_for_rank",
    "reconcile",
    "compare_rankings",
    "evaluate_profile",
    "ProfileService",
]
