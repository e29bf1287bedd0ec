"""Utility modules."""
from topik_practice.utils.json_utils import json_dump, json_load, read_json_file
from topik_practice.utils.time_utils import format_clock, today_iso

__all__ = [
    "json_dump",
    "json_load",
    "read_json_file",
    "format_clock",
    "today_iso",
]
