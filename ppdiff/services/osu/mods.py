from enum import IntFlag

from ppdiff.core.constants import NO_MODS_LABEL


class LegacyMods(IntFlag):
    """Modifier bit flags used by the legacy API and the score tables."""

    NONE = 0
    NO_FAIL = 1 << 0
    EASY = 1 << 1
    TOUCH_DEVICE = 1 << 2
    HIDDEN = 1 << 3
    HARD_ROCK = 1 << 4
    SUDDEN_DEATH = 1 << 5
    DOUBLE_TIME = 1 << 6
    RELAX = 1 << 7
    HALF_TIME = 1 << 8
    NIGHTCORE = 1 << 9  # always sent together with DOUBLE_TIME
    FLASHLIGHT = 1 << 10
    AUTOPLAY = 1 << 11
    SPUN_OUT = 1 << 12
    AUTOPILOT = 1 << 13
    PERFECT = 1 << 14  # always sent together with SUDDEN_DEATH
    KEY4 = 1 << 15
    KEY5 = 1 << 16
    KEY6 = 1 << 17
    KEY7 = 1 << 18
    KEY8 = 1 << 19
    FADE_IN = 1 << 20
    RANDOM = 1 << 21
    CINEMA = 1 << 22
    TARGET = 1 << 23
    KEY9 = 1 << 24
    KEY_COOP = 1 << 25
    KEY1 = 1 << 26
    KEY3 = 1 << 27
    KEY2 = 1 << 28
    SCORE_V2 = 1 << 29
    MIRROR = 1 << 30


# Display order follows bit order
ACRONYMS: dict[LegacyMods, str] = {
    LegacyMods.NO_FAIL: "NF",
    LegacyMods.EASY: "EZ",
    LegacyMods.TOUCH_DEVICE: "TD",
    LegacyMods.HIDDEN: "HD",
    LegacyMods.HARD_ROCK: "HR",
    LegacyMods.SUDDEN_DEATH: "SD",
    LegacyMods.DOUBLE_TIME: "DT",
    LegacyMods.RELAX: "RX",
    LegacyMods.HALF_TIME: "HT",
    LegacyMods.NIGHTCORE: "NC",
    LegacyMods.FLASHLIGHT: "FL",
    LegacyMods.AUTOPLAY: "AT",
    LegacyMods.SPUN_OUT: "SO",
    LegacyMods.AUTOPILOT: "AP",
    LegacyMods.PERFECT: "PF",
    LegacyMods.KEY4: "4K",
    LegacyMods.KEY5: "5K",
    LegacyMods.KEY6: "6K",
    LegacyMods.KEY7: "7K",
    LegacyMods.KEY8: "8K",
    LegacyMods.FADE_IN: "FI",
    LegacyMods.RANDOM: "RD",
    LegacyMods.CINEMA: "CN",
    LegacyMods.TARGET: "TP",
    LegacyMods.KEY9: "9K",
    LegacyMods.KEY_COOP: "DS",
    LegacyMods.KEY1: "1K",
    LegacyMods.KEY3: "3K",
    LegacyMods.KEY2: "2K",
    LegacyMods.SCORE_V2: "SV2",
    LegacyMods.MIRROR: "MR",
}

# A mod that implies another hides it in the summary
_SUPERSEDES = {
    LegacyMods.NIGHTCORE: LegacyMods.DOUBLE_TIME,
    LegacyMods.PERFECT: LegacyMods.SUDDEN_DEATH,
}


def mod_acronyms(enabled_mods: int) -> list[str]:
    """Decode legacy bit flags into acronyms. Unknown bits are ignored."""
    flags = int(enabled_mods)
    for mod, implied in _SUPERSEDES.items():
        if flags & mod:
            flags &= ~implied
    return [acronym for mod, acronym in ACRONYMS.items() if flags & mod]


def mod_summary(enabled_mods: int) -> str:
    acronyms = mod_acronyms(enabled_mods)
    return ", ".join(acronyms) if acronyms else NO_MODS_LABEL
