from async_lru import alru_cache
from loguru import logger

from ppdiff.core.constants import BEATMAP_RESOLVER_CACHE_SIZE
from ppdiff.core.exceptions import IngestionError
from ppdiff.models.beatmap import BeatmapDefinition
from ppdiff.services.beatmaps.metadata import parse_metadata
from ppdiff.services.beatmaps.store import BeatmapStore
from ppdiff.services.osu.client import OsuClient


class BeatmapResolver:
    """
    Read-through cache in front of the beatmap download endpoint.
    """

    def __init__(self, store: BeatmapStore, client: OsuClient):
        self.store = store
        self.client = client
        self.resolve = alru_cache(maxsize=BEATMAP_RESOLVER_CACHE_SIZE)(self._resolve)

    async def _resolve(self, beatmap_id: int) -> BeatmapDefinition:
        """
        Return the definition of ``beatmap_id``, downloading it on first use.

        Concurrent calls for the same id within this process share one
        download; across processes a duplicate write of the same content is
        possible and harmless.
        """
        content = await self._read_cached(beatmap_id)

        if content is None:
            logger.info(f"Downloading beatmap {beatmap_id}")
            try:
                content = await self.client.download_beatmap(beatmap_id)
            except Exception as e:
                raise IngestionError(f"Failed to download beatmap {beatmap_id}: {e}") from e

            if not content.strip():
                raise IngestionError(f"Beatmap {beatmap_id} is unavailable")

            await self._write_cached(beatmap_id, content)
        else:
            logger.debug(f"Beatmap {beatmap_id} served from cache")

        return BeatmapDefinition(beatmap_id=beatmap_id, content=content, **parse_metadata(content))

    async def _read_cached(self, beatmap_id: int) -> str | None:
        try:
            return await self.store.get(beatmap_id)
        except Exception as e:
            logger.warning(f"Beatmap cache read failed for {beatmap_id}, treating as miss: {e}")
            return None

    async def _write_cached(self, beatmap_id: int, content: str) -> None:
        # The downloaded definition is still usable when the write fails
        try:
            await self.store.set(beatmap_id, content)
            logger.debug(f"Cached beatmap {beatmap_id}")
        except Exception as e:
            logger.warning(f"Beatmap cache write failed for {beatmap_id}: {e}")
