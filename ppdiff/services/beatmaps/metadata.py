_METADATA_FIELDS = {"Artist": "artist", "Title": "title", "Creator": "creator", "Version": "version"}


def parse_metadata(content: str) -> dict[str, str]:
    """
    Read display metadata from the [Metadata] section of a .osu file.

    Only the fields needed to name a beatmap are returned; anything missing is
    left out rather than guessed.
    """
    metadata: dict[str, str] = {}
    in_section = False

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if line.startswith("[") and line.endswith("]"):
            if in_section:
                break
            in_section = line == "[Metadata]"
            continue
        if not in_section or ":" not in line:
            continue

        key, _, value = line.partition(":")
        field = _METADATA_FIELDS.get(key.strip())
        if field:
            metadata[field] = value.strip()

    return metadata
