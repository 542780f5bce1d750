from typing import Any

import httpx

from ppdiff.core.base_client import BaseClient
from ppdiff.core.config import settings
from ppdiff.core.constants import API_TOP_PLAYS_MAX
from ppdiff.models.ruleset import Ruleset


class OsuClient(BaseClient):
    """
    Client for the osu! legacy (v1) API and the beatmap file endpoint.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = settings.OSU_BASE_URL,
        timeout: float = settings.HTTP_TIMEOUT,
        max_retries: int = settings.HTTP_MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url=base_url, timeout=timeout, max_retries=max_retries, transport=transport)
        self.api_key = api_key

    async def _api(self, endpoint: str, params: dict[str, Any]) -> Any:
        """Call a v1 endpoint, always including the API key."""
        return await self.get(f"/api/{endpoint}", params={"k": self.api_key, **params})

    async def get_user(self, user: str, ruleset: Ruleset) -> dict[str, Any] | None:
        """
        Fetch a user's profile. ``user`` may be an id or a username.

        Returns:
            The raw user record, or None if no such user exists
        """
        data = await self._api("get_user", {"u": user, "m": int(ruleset)})
        if not data:
            return None
        if not isinstance(data, list):
            raise ValueError(f"Unexpected get_user response: {data!r}")
        return data[0]

    async def get_user_best(self, user: str | int, ruleset: Ruleset, limit: int = API_TOP_PLAYS_MAX) -> list[dict]:
        """Fetch a user's best ranked plays, highest pp first."""
        limit = max(1, min(limit, API_TOP_PLAYS_MAX))
        data = await self._api("get_user_best", {"u": user, "m": int(ruleset), "limit": limit})
        if data and not isinstance(data, list):
            raise ValueError(f"Unexpected get_user_best response: {data!r}")
        return data or []

    async def download_beatmap(self, beatmap_id: int) -> str:
        """Download a beatmap definition (.osu). Unknown beatmaps yield an empty body."""
        return await self.get_text(f"/osu/{beatmap_id}")
