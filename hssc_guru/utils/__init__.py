"""Utility modules."""
from hssc_guru.utils.json_utils import compact_dump, json_load, read_json_file
from hssc_guru.utils.time_utils import format_clock, parse_iso_timestamp, utc_now
from hssc_guru.utils.validation import validate_id, validate_topic

__all__ = [
    "compact_dump",
    "json_load",
    "read_json_file",
    "format_clock",
    "parse_iso_timestamp",
    "utc_now",
    "validate_id",
    "validate_topic",
]
