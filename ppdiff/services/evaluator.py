import math
from abc import ABC, abstractmethod

import httpx
from loguru import logger

from ppdiff.core.base_client import BaseClient
from ppdiff.core.config import settings
from ppdiff.core.exceptions import PlayEvaluationError
from ppdiff.models.beatmap import BeatmapDefinition
from ppdiff.models.play import RawPlay
from ppdiff.models.ruleset import Ruleset
from ppdiff.services.osu.mods import mod_acronyms


class PerformanceEvaluator(ABC):
    """
    Computes the local performance value of a single play.
    """

    @abstractmethod
    async def evaluate(self, beatmap: BeatmapDefinition, ruleset: Ruleset, play: RawPlay) -> float:
        """
        Returns:
            Performance value >= 0

        Raises:
            PlayEvaluationError: the value could not be computed
        """
        pass

    async def close(self) -> None:
        pass


class RemoteEvaluator(BaseClient, PerformanceEvaluator):
    """
    Delegates the performance formula to an external calculator service.

    POST /calculate with the beatmap, mods, hit statistics and combo; the
    service answers ``{"pp": <float>}``.
    """

    def __init__(
        self,
        base_url: str = settings.PP_CALCULATOR_URL,
        timeout: float = settings.HTTP_TIMEOUT,
        max_retries: int = settings.HTTP_MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url=base_url, timeout=timeout, max_retries=max_retries, transport=transport)

    async def evaluate(self, beatmap: BeatmapDefinition, ruleset: Ruleset, play: RawPlay) -> float:
        payload = {
            "ruleset_id": int(ruleset),
            "beatmap_id": beatmap.beatmap_id,
            "beatmap": beatmap.content,
            "mods": mod_acronyms(play.enabled_mods),
            "statistics": play.statistics.model_dump(),
            "max_combo": play.max_combo,
        }

        try:
            data = await self.post("/calculate", json=payload)
        except (httpx.HTTPError, ValueError) as e:
            raise PlayEvaluationError(beatmap.beatmap_id, str(e)) from e

        pp = data.get("pp") if isinstance(data, dict) else None
        if isinstance(pp, bool) or not isinstance(pp, (int, float)):
            raise PlayEvaluationError(beatmap.beatmap_id, f"malformed calculator response: {data!r}")
        if not math.isfinite(pp) or pp < 0:
            raise PlayEvaluationError(beatmap.beatmap_id, f"calculator returned invalid pp {pp}")

        logger.debug(f"Beatmap {beatmap.beatmap_id}: local pp {pp:.2f}, live pp {play.live_pp:.2f}")
        return float(pp)
