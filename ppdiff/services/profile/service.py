import asyncio

from loguru import logger

from ppdiff.core.config import settings
from ppdiff.core.exceptions import PpdiffError, PlayEvaluationError
from ppdiff.models.play import PlayResult, RawPlay
from ppdiff.models.profile import ProfileComparison
from ppdiff.models.ruleset import Ruleset
from ppdiff.services.beatmaps.resolver import BeatmapResolver
from ppdiff.services.evaluator import PerformanceEvaluator
from ppdiff.services.ingestion.base import PlaySource
from ppdiff.services.osu.mods import mod_summary
from ppdiff.services.profile.engine import evaluate_profile


class ProfileService:
    """
    Recomputes a profile's total from its top plays and compares it with the live total.
    """

    def __init__(
        self,
        source: PlaySource,
        resolver: BeatmapResolver,
        evaluator: PerformanceEvaluator,
        concurrency: int = settings.EVALUATION_CONCURRENCY,
        limit: int = settings.TOP_PLAYS_LIMIT,
    ):
        self.source = source
        self.resolver = resolver
        self.evaluator = evaluator
        self.limit = limit
        # Limit concurrent downloads/evaluations to avoid rate limiting
        self._sem = asyncio.Semaphore(concurrency)

    async def compare(self, user: str, ruleset: Ruleset = Ruleset.OSU) -> ProfileComparison:
        profile = await self.source.fetch_profile(user, ruleset)
        raw_plays = await self.source.fetch_top_plays(profile, ruleset, self.limit)

        # Every play must be evaluated before aggregation starts; the first
        # failure cancels the remaining evaluations and aborts the comparison.
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self._evaluate_play(play, ruleset)) for play in raw_plays]
        except ExceptionGroup as group:
            raise group.exceptions[0]
        plays = [task.result() for task in tasks]

        totals, reports = evaluate_profile(profile.pp_raw, plays)
        logger.info(
            f"{profile.username}: live {totals.reference_total:.1f}pp, "
            f"local {totals.adjusted_local_total:.1f}pp ({totals.delta:+.1f}) over {len(plays)} plays"
        )

        return ProfileComparison(
            user_id=profile.user_id,
            username=profile.username,
            ruleset=ruleset,
            source=self.source.name,
            totals=totals,
            plays=reports,
        )

    async def _evaluate_play(self, play: RawPlay, ruleset: Ruleset) -> PlayResult:
        async with self._sem:
            try:
                beatmap = await self.resolver.resolve(play.beatmap_id)
                local_pp = await self.evaluator.evaluate(beatmap, ruleset, play)
            except PpdiffError:
                raise
            except Exception as e:
                raise PlayEvaluationError(play.beatmap_id, str(e)) from e

        return PlayResult(
            beatmap_id=play.beatmap_id,
            beatmap_name=beatmap.display_name,
            live_pp=play.live_pp,
            local_pp=local_pp,
            mods=mod_summary(play.enabled_mods),
        )
