"""
Tests for the two play sources: the osu! API and the score database.

Run with: pytest tests/test_ingestion.py -v
"""

import asyncio

import httpx
import pytest
from sqlalchemy import text

from conftest import legacy_record, osu_api_handler
from ppdiff.core.database import Database
from ppdiff.core.exceptions import IngestionError, UserNotFoundError
from ppdiff.models.profile import UserProfile
from ppdiff.models.ruleset import Ruleset
from ppdiff.services.ingestion.api import ApiPlaySource
from ppdiff.services.ingestion.database import DatabasePlaySource
from ppdiff.services.osu.client import OsuClient

USERS = {
    "2": {"user_id": "2", "username": "peppy", "pp_raw": "1234.5"},
    "peppy": {"user_id": "2", "username": "peppy", "pp_raw": "1234.5"},
    "3": {"user_id": "3", "username": "restricted", "pp_raw": None},
}


def _api_source(handler) -> ApiPlaySource:
    transport = httpx.MockTransport(handler)
    return ApiPlaySource(OsuClient(api_key="secret", base_url="https://osu.test", max_retries=1, transport=transport))


# =============================================================================
# API source
# =============================================================================


def test_api_profile_by_name_or_id():
    source = _api_source(osu_api_handler(USERS, {}))

    by_name = asyncio.run(source.fetch_profile("peppy", Ruleset.OSU))
    by_id = asyncio.run(source.fetch_profile("2", Ruleset.OSU))

    assert by_name == by_id == UserProfile(user_id=2, username="peppy", pp_raw=1234.5)


def test_api_null_total_is_zero():
    source = _api_source(osu_api_handler(USERS, {}))

    profile = asyncio.run(source.fetch_profile("3", Ruleset.MANIA))

    assert profile.pp_raw == 0.0


def test_api_unknown_user():
    source = _api_source(osu_api_handler(USERS, {}))

    with pytest.raises(UserNotFoundError):
        asyncio.run(source.fetch_profile("nobody", Ruleset.OSU))


def test_api_request_carries_key_and_ruleset():
    seen = []

    def handler(request):
        seen.append(dict(request.url.params))
        return httpx.Response(200, json=[USERS["2"]])

    asyncio.run(_api_source(handler).fetch_profile("2", Ruleset.TAIKO))

    assert seen == [{"k": "secret", "u": "2", "m": "1"}]


def test_api_top_plays_are_parsed():
    best = {2: [legacy_record(100, 250.5, enabled_mods=72), legacy_record(101, 200)]}
    source = _api_source(osu_api_handler(USERS, best))
    profile = UserProfile(user_id=2, username="peppy", pp_raw=1234.5)

    plays = asyncio.run(source.fetch_top_plays(profile, Ruleset.OSU, limit=100))

    assert [p.beatmap_id for p in plays] == [100, 101]
    assert plays[0].enabled_mods == 72
    assert plays[0].live_pp == 250.5
    assert plays[0].max_combo == 500
    assert plays[0].statistics.great == 400
    assert plays[0].statistics.perfect == 80
    assert plays[0].statistics.ok == 2


def test_api_limit_is_forwarded():
    best = {2: [legacy_record(i, 300 - i) for i in range(10)]}
    source = _api_source(osu_api_handler(USERS, best))
    profile = UserProfile(user_id=2, username="peppy")

    plays = asyncio.run(source.fetch_top_plays(profile, Ruleset.OSU, limit=3))

    assert len(plays) == 3


@pytest.mark.parametrize(
    "record",
    [
        legacy_record(100, None),
        legacy_record(100, 120, count300="many"),
        {"beatmap_id": "100", "pp": "120"},
    ],
)
def test_api_malformed_play_fails_the_whole_set(record):
    best = {2: [legacy_record(1, 300), record]}
    source = _api_source(osu_api_handler(USERS, best))
    profile = UserProfile(user_id=2, username="peppy")

    with pytest.raises(IngestionError):
        asyncio.run(source.fetch_top_plays(profile, Ruleset.OSU, limit=100))


def test_api_transport_error_is_an_ingestion_error():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    with pytest.raises(IngestionError, match="Failed to fetch user"):
        asyncio.run(_api_source(handler).fetch_profile("2", Ruleset.OSU))


def test_api_error_object_is_an_ingestion_error():
    def handler(request):
        return httpx.Response(200, json={"error": "Please provide a valid API key."})

    source = _api_source(handler)
    profile = UserProfile(user_id=2, username="peppy")

    with pytest.raises(IngestionError, match="Failed to fetch user"):
        asyncio.run(source.fetch_profile("2", Ruleset.OSU))
    with pytest.raises(IngestionError, match="Failed to fetch top plays"):
        asyncio.run(source.fetch_top_plays(profile, Ruleset.OSU, limit=100))


# =============================================================================
# Database source
# =============================================================================

CREATE_SCORES = """
CREATE TABLE {table} (
    score_id INTEGER PRIMARY KEY,
    user_id INTEGER,
    beatmap_id INTEGER,
    enabled_mods INTEGER,
    maxcombo INTEGER,
    countgeki INTEGER,
    count300 INTEGER,
    count100 INTEGER,
    countkatu INTEGER,
    count50 INTEGER,
    countmiss INTEGER,
    pp REAL
)
"""

INSERT_SCORE = """
INSERT INTO {table} (user_id, beatmap_id, enabled_mods, maxcombo, countgeki, count300,
                     count100, countkatu, count50, countmiss, pp)
VALUES (:user_id, :beatmap_id, :enabled_mods, 500, 80, 400, 3, 2, 0, 1, :pp)
"""


class StaticProfileSource(ApiPlaySource):
    def __init__(self, profile: UserProfile):
        self.profile = profile

    async def fetch_profile(self, user, ruleset):
        return self.profile


def _score(beatmap_id, pp, user_id=2, enabled_mods=0):
    return {"user_id": user_id, "beatmap_id": beatmap_id, "enabled_mods": enabled_mods, "pp": pp}


async def _read_plays(tmp_path, scores, ruleset=Ruleset.OSU, limit=100, blacklist=None, create=True):
    database = Database(f"sqlite:///{tmp_path / 'scores.db'}")
    table = ruleset.scores_table
    try:
        if create:
            async with database.engine.begin() as conn:
                await conn.execute(text(CREATE_SCORES.format(table=table)))
                if scores:
                    await conn.execute(text(INSERT_SCORE.format(table=table)), scores)

        profile = UserProfile(user_id=2, username="peppy", pp_raw=1000.0)
        source = DatabasePlaySource(database, StaticProfileSource(profile), blacklist=blacklist or [])
        return await source.fetch_top_plays(profile, ruleset, limit)
    finally:
        await database.close()


def test_database_reads_ranked_plays_of_the_user(tmp_path):
    scores = [
        _score(10, 150.0),
        _score(11, 300.0, enabled_mods=24),
        _score(12, None),  # unranked: no pp
        _score(13, 999.0, user_id=5),
    ]

    plays = asyncio.run(_read_plays(tmp_path, scores))

    assert [p.beatmap_id for p in plays] == [11, 10]
    assert plays[0].enabled_mods == 24
    assert plays[0].statistics.miss == 1


def test_database_respects_limit(tmp_path):
    scores = [_score(i, float(i)) for i in range(1, 11)]

    plays = asyncio.run(_read_plays(tmp_path, scores, limit=4))

    assert [p.beatmap_id for p in plays] == [10, 9, 8, 7]


def test_database_skips_blacklisted_beatmaps(tmp_path):
    scores = [_score(1257904, 500.0), _score(20, 100.0)]

    plays = asyncio.run(_read_plays(tmp_path, scores, blacklist=[1257904]))

    assert [p.beatmap_id for p in plays] == [20]


def test_database_blacklist_does_not_shrink_the_limit(tmp_path):
    scores = [_score(1257904, 500.0), _score(20, 300.0), _score(21, 200.0), _score(22, 100.0)]

    plays = asyncio.run(_read_plays(tmp_path, scores, limit=2, blacklist=[1257904]))

    assert [p.beatmap_id for p in plays] == [20, 21]


def test_database_uses_ruleset_table(tmp_path):
    plays = asyncio.run(_read_plays(tmp_path, [_score(7, 77.0)], ruleset=Ruleset.MANIA))

    assert [p.beatmap_id for p in plays] == [7]


def test_database_failure_is_an_ingestion_error(tmp_path):
    with pytest.raises(IngestionError, match="Failed to read plays"):
        asyncio.run(_read_plays(tmp_path, [], create=False))


def test_database_profile_comes_from_profile_source(tmp_path):
    profile = UserProfile(user_id=9, username="someone", pp_raw=42.0)
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    source = DatabasePlaySource(database, StaticProfileSource(profile), blacklist=[])

    async def scenario():
        try:
            return await source.fetch_profile("someone", Ruleset.OSU)
        finally:
            await database.close()

    assert asyncio.run(scenario()) == profile
