import asyncio
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import redis.asyncio as redis
from loguru import logger

from ppdiff.core.config import settings
from ppdiff.core.constants import BEATMAP_FILE_SUFFIX


class BeatmapStore(ABC):
    """
    Key -> beatmap definition storage.

    Entries are written once per missing key and never mutated or invalidated
    afterwards, so concurrent readers need no coordination. Two writers racing
    on the same new key write identical content.
    """

    @abstractmethod
    async def get(self, beatmap_id: int) -> str | None:
        pass

    @abstractmethod
    async def set(self, beatmap_id: int, content: str) -> None:
        pass

    async def close(self) -> None:
        pass


class MemoryBeatmapStore(BeatmapStore):
    def __init__(self, initial: dict[int, str] | None = None):
        self._entries: dict[int, str] = dict(initial or {})
        self.writes = 0

    async def get(self, beatmap_id: int) -> str | None:
        return self._entries.get(beatmap_id)

    async def set(self, beatmap_id: int, content: str) -> None:
        self._entries[beatmap_id] = content
        self.writes += 1

    def __contains__(self, beatmap_id: int) -> bool:
        return beatmap_id in self._entries


class FileBeatmapStore(BeatmapStore):
    """Stores each definition as ``<directory>/<beatmap_id>.osu``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, beatmap_id: int) -> Path:
        return self.directory / f"{beatmap_id}{BEATMAP_FILE_SUFFIX}"

    async def get(self, beatmap_id: int) -> str | None:
        return await asyncio.to_thread(self._read, self.path_for(beatmap_id))

    async def set(self, beatmap_id: int, content: str) -> None:
        await asyncio.to_thread(self._write, self.path_for(beatmap_id), content)

    @staticmethod
    def _read(path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, path: Path, content: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

        # Write to a temp file on the same filesystem, then rename over the
        # target so readers never observe a partially written definition.
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", delete=False, suffix=".tmp", dir=self.directory
        ) as tmp:
            tmp.write(content)
            tmp_path = Path(tmp.name)
        try:
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


class RedisBeatmapStore(BeatmapStore):
    KEY_PREFIX = settings.REDIS_BEATMAP_KEY

    def __init__(self, url: str = settings.REDIS_URL, client: redis.Redis | None = None):
        self.url = url
        self._client = client

    async def get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating Redis client for beatmap store")
            self._client = redis.from_url(
                self.url,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                health_check_interval=30,
            )
        return self._client

    def _format_key(self, beatmap_id: int) -> str:
        return f"{self.KEY_PREFIX}{beatmap_id}"

    async def get(self, beatmap_id: int) -> str | None:
        client = await self.get_client()
        return await client.get(self._format_key(beatmap_id))

    async def set(self, beatmap_id: int, content: str) -> None:
        client = await self.get_client()
        await client.set(self._format_key(beatmap_id), content)

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
                logger.info("Beatmap store Redis client closed")
            except Exception as exc:
                logger.warning(f"Failed to close beatmap store Redis client: {exc}")
            finally:
                self._client = None


def create_beatmap_store(backend: str = settings.BEATMAP_CACHE_BACKEND) -> BeatmapStore:
    if backend == "redis":
        return RedisBeatmapStore()
    if backend == "memory":
        return MemoryBeatmapStore()
    if backend == "filesystem":
        return FileBeatmapStore(settings.BEATMAP_CACHE_DIR)
    raise ValueError(f"Unknown beatmap cache backend: {backend}")
