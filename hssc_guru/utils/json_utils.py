"""JSON helpers for drafts and question files."""
import json
from pathlib import Path


def compact_dump(payload: object) -> str:
    """Serialize without whitespace; drafts are rewritten on every tick."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def json_load(data: str) -> object:
    return json.loads(data)


def read_json_file(path: Path, default: object) -> object:
    """Parse a JSON file, or return default when the file is missing.

    Files saved by spreadsheet tools often start with a BOM, so it is accepted.
    """
    if not path.exists():
        return default
    try:
        return json_load(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON at line {e.lineno}") from e
