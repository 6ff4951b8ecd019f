def strip_text(value: str | None) -> str | None:
    """Trim surrounding whitespace (incl. non-breaking spaces); blank strings become None."""
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    return stripped or None
