from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HitStatistics(BaseModel):
    """Hit counts of a play, keyed by judgement."""

    model_config = ConfigDict(frozen=True)

    perfect: int = Field(default=0, ge=0)  # countgeki
    great: int = Field(default=0, ge=0)  # count300
    good: int = Field(default=0, ge=0)  # count100
    ok: int = Field(default=0, ge=0)  # countkatu
    meh: int = Field(default=0, ge=0)  # count50
    miss: int = Field(default=0, ge=0)  # countmiss

    @classmethod
    def from_legacy(cls, record: dict[str, Any]) -> "HitStatistics":
        """Build from the legacy count* columns shared by the API and the score tables."""
        return cls(
            perfect=record["countgeki"],
            great=record["count300"],
            good=record["count100"],
            ok=record["countkatu"],
            meh=record["count50"],
            miss=record["countmiss"],
        )


class RawPlay(BaseModel):
    """A ranked play as ingested, before local evaluation."""

    model_config = ConfigDict(frozen=True)

    beatmap_id: int
    enabled_mods: int = Field(default=0, ge=0)
    max_combo: int = Field(ge=0)
    statistics: HitStatistics
    live_pp: float = Field(ge=0)

    @classmethod
    def from_legacy(cls, record: dict[str, Any]) -> "RawPlay":
        return cls(
            beatmap_id=record["beatmap_id"],
            enabled_mods=record["enabled_mods"],
            max_combo=record["maxcombo"],
            statistics=HitStatistics.from_legacy(record),
            live_pp=record["pp"],
        )


class PlayResult(BaseModel):
    """One evaluated play carrying both its live and locally computed performance."""

    model_config = ConfigDict(frozen=True)

    beatmap_id: int
    beatmap_name: str = ""
    live_pp: float = Field(ge=0)
    local_pp: float = Field(ge=0)
    mods: str = "None"


class PlayReport(PlayResult):
    live_rank: int
    local_rank: int
    rank_shift: int  # live_rank - local_rank
    pp_change: float  # local_pp - live_pp
    weight: float  # weight applied to local_pp in the profile total
