from loguru import logger
from pydantic import ValidationError
from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from ppdiff.core.config import settings
from ppdiff.core.database import Database
from ppdiff.core.exceptions import IngestionError
from ppdiff.models.play import RawPlay
from ppdiff.models.profile import UserProfile
from ppdiff.models.ruleset import Ruleset
from ppdiff.services.ingestion.base import PlaySource

_PLAY_COLUMNS = (
    "beatmap_id, enabled_mods, maxcombo, countgeki, count300, count100, countkatu, count50, countmiss, pp"
)


class DatabasePlaySource(PlaySource):
    """
    Top plays read straight from the ruleset's high-score table.

    The score tables carry no profile total, so the profile itself comes from
    ``profile_source`` (normally the API).
    """

    name = "database"

    def __init__(
        self,
        database: Database,
        profile_source: PlaySource,
        blacklist: list[int] | None = None,
    ):
        self.database = database
        self.profile_source = profile_source
        self.blacklist = set(settings.BEATMAP_BLACKLIST if blacklist is None else blacklist)

    async def fetch_profile(self, user: str, ruleset: Ruleset) -> UserProfile:
        return await self.profile_source.fetch_profile(user, ruleset)

    async def fetch_top_plays(self, profile: UserProfile, ruleset: Ruleset, limit: int) -> list[RawPlay]:
        # Blacklisted beatmaps are excluded before LIMIT so the set still holds `limit` plays
        blacklist_clause = "AND beatmap_id NOT IN :blacklist " if self.blacklist else ""
        # Table name comes from the Ruleset enum, never from user input
        query = text(
            f"SELECT {_PLAY_COLUMNS} FROM {ruleset.scores_table} "
            f"WHERE user_id = :user_id AND pp IS NOT NULL {blacklist_clause}"
            "ORDER BY pp DESC LIMIT :limit"
        )
        params = {"user_id": profile.user_id, "limit": limit}
        if self.blacklist:
            query = query.bindparams(bindparam("blacklist", expanding=True))
            params["blacklist"] = sorted(self.blacklist)

        logger.info(f"Querying {ruleset.scores_table} for user {profile.user_id}")
        try:
            async with self.database.get_session() as session:
                result = await session.execute(query, params)
                rows = [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise IngestionError(f"Failed to read plays for user {profile.user_id}: {e}") from e

        plays = []
        for row in rows:
            try:
                plays.append(RawPlay.from_legacy(row))
            except (KeyError, TypeError, ValidationError) as e:
                raise IngestionError(f"Malformed score row for beatmap {row.get('beatmap_id', '?')}: {e}") from e

        logger.info(f"Read {len(plays)} plays for {profile.username}")
        return plays
