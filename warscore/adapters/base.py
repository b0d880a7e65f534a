"""Abstract base adapter for reading measurement rows from event exports."""

from abc import ABC, abstractmethod


class BaseAdapter(ABC):
    @abstractmethod
    def parse(self, data_path: str) -> list[list]:
        """Parse an export and return a list of 11-column measurement rows.

        Each row holds, by position:
            id, team, supernode, signal strength, location, vibes,
            screenshot, line-of-sight photo, block group,
            supernode distance, subjective bonuses

        Signal strength and supernode distance are numbers, or None
        when the cell is blank.
        """
        pass


ROW_WIDTH = 11
NUMERIC_COLUMNS = (3, 9)  # signal strength, supernode distance
# id, team, supernode, location, block group, subjective bonuses
TEXT_COLUMNS = (0, 1, 2, 4, 8, 10)


def normalize_row(values) -> list:
    """Pad a row to 11 cells, trim strings and parse the numeric columns.

    Text columns are kept as strings even when the export holds a number
    there (e.g. a team called 42 in an unformatted Sheets API response).
    """
    row = list(values)[:ROW_WIDTH]
    if len(row) < ROW_WIDTH:
        row.extend([''] * (ROW_WIDTH - len(row)))

    for col in TEXT_COLUMNS:
        if row[col] is not None and not isinstance(row[col], str):
            row[col] = str(row[col])
    row = [v.strip() if isinstance(v, str) else v for v in row]
    for col in NUMERIC_COLUMNS:
        if row[1]:
            row[col] = parse_number(row[col])
        else:
            # Rows without a team are never scored; keep whatever parses
            try:
                row[col] = parse_number(row[col])
            except ValueError:
                row[col] = None
    return row


def parse_number(val):
    """Parse a numeric cell. Returns None for blank cells.

    Whole numbers stay ints so equal readings compare exactly.
    Raises ValueError for text that is not a number.
    """
    if val is None:
        return None
    if isinstance(val, bool):
        raise ValueError(f"Not a number: {val!r}")
    if isinstance(val, (int, float)):
        return val
    s = str(val).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        return float(s)
