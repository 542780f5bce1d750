from abc import ABC, abstractmethod

from ppdiff.models.play import RawPlay
from ppdiff.models.profile import UserProfile
from ppdiff.models.ruleset import Ruleset


class PlaySource(ABC):
    """
    Produces the complete play set and reference total of one profile.

    Implementations must either return every play or raise IngestionError;
    weighted sums are sensitive to missing plays, so partial results are never
    returned.
    """

    name: str = ""

    @abstractmethod
    async def fetch_profile(self, user: str, ruleset: Ruleset) -> UserProfile:
        """
        Raises:
            UserNotFoundError: no such user
            IngestionError: the profile could not be fetched or parsed
        """
        pass

    @abstractmethod
    async def fetch_top_plays(self, profile: UserProfile, ruleset: Ruleset, limit: int) -> list[RawPlay]:
        """
        Raises:
            IngestionError: any play could not be fetched or parsed
        """
        pass
