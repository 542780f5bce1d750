import httpx
from loguru import logger
from pydantic import ValidationError

from ppdiff.core.exceptions import IngestionError, UserNotFoundError
from ppdiff.models.play import RawPlay
from ppdiff.models.profile import UserProfile
from ppdiff.models.ruleset import Ruleset
from ppdiff.services.ingestion.base import PlaySource
from ppdiff.services.osu.client import OsuClient


class ApiPlaySource(PlaySource):
    """Profile and top plays from the osu! v1 API."""

    name = "api"

    def __init__(self, client: OsuClient):
        self.client = client

    async def fetch_profile(self, user: str, ruleset: Ruleset) -> UserProfile:
        logger.info(f"Getting user data for '{user}' ({ruleset.short_name})")
        try:
            data = await self.client.get_user(user, ruleset)
        except (httpx.HTTPError, ValueError, LookupError) as e:
            raise IngestionError(f"Failed to fetch user '{user}': {e}") from e

        if data is None:
            raise UserNotFoundError(user)

        try:
            return UserProfile(user_id=data["user_id"], username=data["username"], pp_raw=data.get("pp_raw"))
        except (KeyError, ValidationError) as e:
            raise IngestionError(f"Malformed user record for '{user}': {e}") from e

    async def fetch_top_plays(self, profile: UserProfile, ruleset: Ruleset, limit: int) -> list[RawPlay]:
        logger.info(f"Getting top plays for {profile.username}")
        try:
            records = await self.client.get_user_best(profile.user_id, ruleset, limit)
        except (httpx.HTTPError, ValueError, LookupError) as e:
            raise IngestionError(f"Failed to fetch top plays for {profile.username}: {e}") from e

        plays = []
        for record in records:
            try:
                plays.append(RawPlay.from_legacy(record))
            except (KeyError, TypeError, ValidationError) as e:
                raise IngestionError(f"Malformed play record {record.get('beatmap_id', '?')}: {e}") from e

        logger.info(f"Fetched {len(plays)} plays for {profile.username}")
        return plays
