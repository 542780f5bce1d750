class PpdiffError(Exception):
    """Base class for errors raised while comparing a profile."""


class IngestionError(PpdiffError):
    """
    The play set or the reference total could not be produced in full.

    Raised before aggregation starts; the engine never sees partial data.
    """


class UserNotFoundError(IngestionError):
    def __init__(self, user: str):
        super().__init__(f"User '{user}' not found")
        self.user = user


class PlayEvaluationError(PpdiffError):
    """Local performance for a single play could not be computed."""

    def __init__(self, beatmap_id: int, reason: str):
        super().__init__(f"Failed to evaluate play on beatmap {beatmap_id}: {reason}")
        self.beatmap_id = beatmap_id
        self.reason = reason
