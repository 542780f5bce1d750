from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ppdiff.models.play import PlayReport
from ppdiff.models.ruleset import Ruleset


class UserProfile(BaseModel):
    """Identity and authoritative total of a player, as reported by the server."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    pp_raw: float = 0.0

    @field_validator("pp_raw", mode="before")
    @classmethod
    def _missing_total_is_zero(cls, value):
        # Inactive or restricted players come back with a null total
        return 0.0 if value is None else value


class ProfileTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    reference_total: float
    weighted_live_sum: float
    weighted_local_sum: float
    bonus: float
    adjusted_local_total: float
    delta: float


class ProfileComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    ruleset: Ruleset
    source: Literal["api", "database"]
    totals: ProfileTotals
    plays: list[PlayReport] = Field(default_factory=list)
