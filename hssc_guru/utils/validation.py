"""Path and query parameter checks."""
import re

from fastapi import HTTPException

# slugs, uuid hex ids and numeric ids; never a path
_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,99}$")


def validate_id(name: str, value: str) -> str:
    """Strip an identifier taken from the URL and reject anything but a plain token."""
    cleaned = value.strip() if isinstance(value, str) else ""
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if not _ID_PATTERN.match(cleaned):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned


def validate_topic(value: str) -> str:
    """Topics are free text (Hindi included) but never contain a path separator."""
    cleaned = value.strip() if isinstance(value, str) else ""
    if not cleaned:
        raise HTTPException(status_code=400, detail="topic is required")
    if len(cleaned) > 100 or "/" in cleaned or "\\" in cleaned:
        raise HTTPException(status_code=400, detail="Invalid topic")
    return cleaned
