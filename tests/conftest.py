"""
Pytest configuration and shared fixtures for ppdiff tests.
"""

import json

import httpx
import pytest

from ppdiff.core.exceptions import PlayEvaluationError
from ppdiff.models.play import HitStatistics, PlayResult, RawPlay
from ppdiff.services.evaluator import PerformanceEvaluator

SAMPLE_OSU_FILE = """osu file format v14

[General]
AudioFilename: audio.mp3
Mode: 0

[Metadata]
Title:Blue Zenith
TitleUnicode:Blue Zenith
Artist:xi
ArtistUnicode:xi
Creator:Asphyxia
Version:FOUR DIMENSIONS
BeatmapID:658127

[Difficulty]
HPDrainRate:6
CircleSize:4
"""


class FakeEvaluator(PerformanceEvaluator):
    """Returns pre-set local pp per beatmap and records every call."""

    def __init__(self, local_pp: dict[int, float], failing: set[int] | None = None):
        self.local_pp = local_pp
        self.failing = failing or set()
        self.calls: list[int] = []
        self.closed = False

    async def evaluate(self, beatmap, ruleset, play) -> float:
        self.calls.append(beatmap.beatmap_id)
        if beatmap.beatmap_id in self.failing:
            raise PlayEvaluationError(beatmap.beatmap_id, "calculator exploded")
        return self.local_pp[beatmap.beatmap_id]

    async def close(self) -> None:
        self.closed = True


def legacy_record(beatmap_id: int, pp: float | None, enabled_mods: int = 0, **overrides) -> dict:
    """A get_user_best entry as the v1 API returns it (numbers as strings)."""
    record = {
        "beatmap_id": str(beatmap_id),
        "score": "1000000",
        "maxcombo": "500",
        "count50": "0",
        "count100": "3",
        "count300": "400",
        "countmiss": "1",
        "countkatu": "2",
        "countgeki": "80",
        "perfect": "0",
        "enabled_mods": str(enabled_mods),
        "user_id": "2",
        "rank": "A",
        "pp": None if pp is None else str(pp),
    }
    record.update(overrides)
    return record


def osu_api_handler(users: dict[str, dict], best: dict[int, list[dict]], beatmaps: dict[int, str] | None = None):
    """httpx.MockTransport handler serving a tiny slice of the osu! v1 API."""
    beatmaps = beatmaps or {}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        params = request.url.params
        if path == "/api/get_user":
            user = users.get(params["u"])
            return httpx.Response(200, text=json.dumps([user] if user else []))
        if path == "/api/get_user_best":
            plays = best.get(int(params["u"]), [])
            return httpx.Response(200, text=json.dumps(plays[: int(params["limit"])]))
        if path.startswith("/osu/"):
            return httpx.Response(200, text=beatmaps.get(int(path.rsplit("/", 1)[1]), ""))
        return httpx.Response(404)

    return handler


@pytest.fixture
def sample_osu_file() -> str:
    return SAMPLE_OSU_FILE


@pytest.fixture
def make_play():
    def _make(beatmap_id: int, live_pp: float, local_pp: float, name: str = "") -> PlayResult:
        return PlayResult(beatmap_id=beatmap_id, beatmap_name=name, live_pp=live_pp, local_pp=local_pp)

    return _make


@pytest.fixture
def make_raw_play():
    def _make(beatmap_id: int, live_pp: float, enabled_mods: int = 0) -> RawPlay:
        return RawPlay(
            beatmap_id=beatmap_id,
            enabled_mods=enabled_mods,
            max_combo=500,
            statistics=HitStatistics(great=400, good=3, miss=1),
            live_pp=live_pp,
        )

    return _make
