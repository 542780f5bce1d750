from typing import Literal

from loguru import logger

from ppdiff.core.config import settings
from ppdiff.core.database import Database
from ppdiff.core.security import redact_key
from ppdiff.services.beatmaps.resolver import BeatmapResolver
from ppdiff.services.beatmaps.store import BeatmapStore, create_beatmap_store
from ppdiff.services.evaluator import PerformanceEvaluator, RemoteEvaluator
from ppdiff.services.ingestion.api import ApiPlaySource
from ppdiff.services.ingestion.base import PlaySource
from ppdiff.services.ingestion.database import DatabasePlaySource
from ppdiff.services.osu.client import OsuClient
from ppdiff.services.profile.service import ProfileService

SourceName = Literal["api", "database"]


class DatabaseNotConfiguredError(RuntimeError):
    pass


class ServiceContainer:
    """
    Owns the long-lived clients shared by every comparison and wires them into services.
    """

    def __init__(
        self,
        client: OsuClient | None = None,
        store: BeatmapStore | None = None,
        evaluator: PerformanceEvaluator | None = None,
        database: Database | None = None,
    ):
        self.client = client or OsuClient(api_key=settings.OSU_API_KEY)
        self.store = store or create_beatmap_store()
        self.evaluator = evaluator or RemoteEvaluator()
        self.resolver = BeatmapResolver(self.store, self.client)
        self._database = database

        if not settings.OSU_API_KEY and client is None:
            logger.warning("OSU_API_KEY is not set. API requests will be rejected until configured.")
        else:
            logger.debug(f"Using osu! API key {redact_key(self.client.api_key)}")

    @property
    def database(self) -> Database:
        if self._database is None:
            if not settings.DATABASE_URL:
                raise DatabaseNotConfiguredError("DATABASE_URL is not configured")
            self._database = Database(settings.DATABASE_URL)
        return self._database

    def play_source(self, source: SourceName = "api") -> PlaySource:
        api_source = ApiPlaySource(self.client)
        if source == "database":
            return DatabasePlaySource(self.database, profile_source=api_source)
        return api_source

    def profile_service(self, source: SourceName = "api") -> ProfileService:
        return ProfileService(self.play_source(source), self.resolver, self.evaluator)

    async def close(self) -> None:
        await self.client.close()
        await self.evaluator.close()
        await self.store.close()
        if self._database is not None:
            await self._database.close()


_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


async def close_container() -> None:
    global _container
    if _container is not None:
        await _container.close()
        _container = None
