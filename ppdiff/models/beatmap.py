from pydantic import BaseModel, ConfigDict


class BeatmapDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    beatmap_id: int
    content: str
    artist: str = ""
    title: str = ""
    creator: str = ""
    version: str = ""

    @property
    def display_name(self) -> str:
        if not (self.artist or self.title):
            return str(self.beatmap_id)
        name = f"{self.artist} - {self.title}"
        if self.creator:
            name += f" ({self.creator})"
        if self.version:
            name += f" [{self.version}]"
        return name
