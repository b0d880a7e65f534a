"""Adapter for JSON exports of the measurements sheet (e.g. Sheets API values)."""

import json

from .base import BaseAdapter, normalize_row


class JsonAdapter(BaseAdapter):
    """Parse measurement rows from a JSON array of arrays.

    Handles a bare array, a Sheets API response ({"values": [...]}) or an
    object with a "rows" array. Double-encoded JSON strings are unwrapped.

    Args:
        has_header: If True, the first row is a header and is skipped.
    """

    def __init__(self, has_header: bool = True):
        self.has_header = has_header

    def parse(self, data_path: str) -> list[list]:
        """Parse a JSON file and return measurement rows."""
        with open(data_path, 'r', encoding='utf-8') as f:
            raw_data = json.load(f)

        # Unwrap double-encoded JSON
        if isinstance(raw_data, str):
            try:
                raw_data = json.loads(raw_data)
            except json.JSONDecodeError:
                return []

        if isinstance(raw_data, dict):
            for key in ('values', 'rows', 'measurements'):
                if key in raw_data and isinstance(raw_data[key], list):
                    raw_rows = raw_data[key]
                    break
            else:
                return []
        elif isinstance(raw_data, list):
            raw_rows = raw_data
        else:
            return []

        if self.has_header:
            raw_rows = raw_rows[1:]

        rows = []
        for i, values in enumerate(raw_rows):
            if not isinstance(values, list) or not values:
                continue
            try:
                rows.append(normalize_row(values))
            except ValueError as e:
                raise ValueError(f"{data_path} row {i + 1}: {e}") from e
        return rows
