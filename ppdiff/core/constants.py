"""
Core constants used across the application. Keep these simple and documented.
"""

# Geometric weight applied to the play at 0-based rank i: PP_DECAY ** i
PP_DECAY: float = 0.95

# osu! API v1 caps get_user_best at 100 entries
API_TOP_PLAYS_MAX: int = 100

BEATMAP_FILE_SUFFIX: str = ".osu"
BEATMAP_RESOLVER_CACHE_SIZE: int = 1000

NO_MODS_LABEL: str = "None"
