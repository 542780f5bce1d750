from enum import IntEnum


class Ruleset(IntEnum):
    OSU = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3

    @property
    def short_name(self) -> str:
        return _SHORT_NAMES[self]

    @property
    def scores_table(self) -> str:
        """High-score table holding the ranked plays of this ruleset."""
        return _SCORE_TABLES[self]


_SHORT_NAMES = {
    Ruleset.OSU: "osu",
    Ruleset.TAIKO: "taiko",
    Ruleset.CATCH: "fruits",
    Ruleset.MANIA: "mania",
}

_SCORE_TABLES = {
    Ruleset.OSU: "osu_scores_high",
    Ruleset.TAIKO: "osu_scores_taiko_high",
    Ruleset.CATCH: "osu_scores_fruits_high",
    Ruleset.MANIA: "osu_scores_mania_high",
}
