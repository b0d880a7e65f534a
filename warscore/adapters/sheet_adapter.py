"""Adapter for CSV/TSV downloads of the measurements sheet."""

import csv

from .base import BaseAdapter, normalize_row


class SheetAdapter(BaseAdapter):
    """Parse measurement rows from a spreadsheet export.

    The first row is the sheet header and is skipped. Columns are read by
    position, so renamed headers don't matter.

    Args:
        delimiter: Field separator. Defaults to tab for .tsv files and
                   comma for everything else.
    """

    def __init__(self, delimiter: str | None = None):
        self.delimiter = delimiter

    def parse(self, data_path: str) -> list[list]:
        """Parse a CSV/TSV file and return measurement rows."""
        delimiter = self.delimiter
        if delimiter is None:
            delimiter = '\t' if data_path.lower().endswith('.tsv') else ','

        rows = []
        with open(data_path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.reader(f, delimiter=delimiter)
            next(reader, None)  # skip header
            for values in reader:
                if not any(v.strip() for v in values):
                    continue
                try:
                    rows.append(normalize_row(values))
                except ValueError as e:
                    raise ValueError(f"{data_path} line {reader.line_num}: {e}") from e
        return rows
