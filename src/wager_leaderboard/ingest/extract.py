"""Turn sheet cells into validated ``Record`` values.

Both extractors are generators that never raise: a row that cannot become
a Record is logged and skipped.
"""

import logging
import math
import re
from collections.abc import Iterator
from typing import Any

from wager_leaderboard.domain.record import Record
from wager_leaderboard.ingest.unwrap import SheetTable

logger = logging.getLogger(__name__)

USERNAME_COLUMN = 3
WAGERED_COLUMN = 2

# Longest leading decimal literal, the way JavaScript's parseFloat reads it.
_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def coerce_username(value: Any) -> str:
    if value is None or value is False or value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def coerce_wagered(value: Any) -> float:
    """Parse a wagered cell; NaN marks anything that is not a number."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int | float):
        try:
            return float(value)
        except OverflowError:
            return math.inf
    if isinstance(value, str):
        match = _FLOAT_PREFIX_RE.match(value.strip())
        if match:
            return float(match.group(0).replace("Infinity", "inf"))
    return math.nan


def _first_cell(row: list[Any]) -> Any:
    return row[0] if row else None


def extract_paired_columns(usernames: SheetTable, wagered: SheetTable) -> Iterator[Record]:
    """Zip a username column with a wagered column by position.

    Stops at the shorter column. A wagered amount of zero is accepted.
    """
    for index, (name_row, amount_row) in enumerate(zip(usernames.rows, wagered.rows)):
        username = coerce_username(_first_cell(name_row))
        amount = coerce_wagered(_first_cell(amount_row))
        if not username or not math.isfinite(amount) or amount < 0:
            logger.debug("Skipping paired row %d (username=%r, wagered=%r)", index, username, amount)
            continue
        yield Record(username=username, wagered=amount)


def extract_sheet_rows(
    table: SheetTable,
    username_column: int = USERNAME_COLUMN,
    wagered_column: int = WAGERED_COLUMN,
) -> Iterator[Record]:
    """Read username and wagered columns from a full sheet, skipping the header.

    Only strictly positive amounts are kept.
    """
    min_cells = max(username_column, wagered_column) + 1
    for index, row in enumerate(table.rows[1:], start=1):
        if len(row) < min_cells:
            logger.debug("Skipping sheet row %d: %d cells", index, len(row))
            continue
        username = coerce_username(row[username_column])
        amount = coerce_wagered(row[wagered_column])
        if not username or not math.isfinite(amount) or amount <= 0:
            logger.debug("Skipping sheet row %d (username=%r, wagered=%r)", index, username, amount)
            continue
        yield Record(username=username, wagered=amount)
