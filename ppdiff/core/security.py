def redact_key(key: str | None) -> str:
    """
    Redact an API key for logging purposes.
    Shows the first 4 characters followed by ***.
    """
    if not key:
        return "None"
    if len(key) <= 4:
        return "***"
    return f"{key[:4]}***"
