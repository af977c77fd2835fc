"""Recover the gviz ``table`` document from whatever a relay sent back.

Google's visualization endpoint answers with a JSONP call behind an
anti-hijacking comment, and each relay adds its own framing on top. The
strategies below are tried in order; a matching strategy rewrites the text
and the chain starts again on the result, until only the brace scan is
left to apply.
"""

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from wager_leaderboard.ingest.errors import MalformedPayload

logger = logging.getLogger(__name__)

GVIZ_COMMENT = "/*O_o*/\n"
GVIZ_CALLBACK = "google.visualization.Query.setResponse("
GVIZ_PREFIX_LENGTH = 47
GVIZ_SUFFIX_LENGTH = 2
MARKER_SKIP_LENGTH = 9
CONTENTS_PREFIX = '{"contents":'

_MAX_DEPTH = 8


@dataclass(frozen=True)
class UnwrapStrategy:
    name: str
    matches: Callable[[str], bool]
    unwrap: Callable[[str], str]


@dataclass(frozen=True)
class SheetTable:
    """Rows of cell values; ``None`` where a cell or its ``v`` is missing."""

    rows: list[list[Any]]


def _is_gviz_response(text: str) -> bool:
    return (
        len(text) >= GVIZ_PREFIX_LENGTH + GVIZ_SUFFIX_LENGTH
        and text[GVIZ_PREFIX_LENGTH - len(GVIZ_CALLBACK) : GVIZ_PREFIX_LENGTH] == GVIZ_CALLBACK
        and text.endswith(");")
    )


def _strip_gviz_response(text: str) -> str:
    return text[GVIZ_PREFIX_LENGTH:-GVIZ_SUFFIX_LENGTH]


def _has_comment_marker(text: str) -> bool:
    return text.startswith(GVIZ_COMMENT)


def _strip_comment_marker(text: str) -> str:
    # The marker is the comment line plus one separator character, but the
    # opening brace of a document glued to the comment must survive.
    if text[len(GVIZ_COMMENT) : MARKER_SKIP_LENGTH] == "{":
        return text[len(GVIZ_COMMENT) :]
    return text[MARKER_SKIP_LENGTH:]


def _is_contents_envelope(text: str) -> bool:
    return text.startswith(CONTENTS_PREFIX)


def _open_contents_envelope(text: str) -> str:
    try:
        envelope = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise MalformedPayload("Unreadable contents envelope", cause=exc) from exc
    contents = envelope.get("contents") if isinstance(envelope, dict) else None
    if not isinstance(contents, str):
        raise MalformedPayload("Contents envelope does not hold a string payload")
    return contents


def _scan_braces(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}") + 1
    if start >= 0 and end > start:
        return text[start:end]
    return text


GVIZ_RESPONSE = UnwrapStrategy("gviz_response", _is_gviz_response, _strip_gviz_response)
COMMENT_MARKER = UnwrapStrategy("comment_marker", _has_comment_marker, _strip_comment_marker)
CONTENTS_ENVELOPE = UnwrapStrategy("contents_envelope", _is_contents_envelope, _open_contents_envelope)
BRACE_SCAN = UnwrapStrategy("brace_scan", lambda text: True, _scan_braces)

DEFAULT_STRATEGIES: tuple[UnwrapStrategy, ...] = (GVIZ_RESPONSE, COMMENT_MARKER, CONTENTS_ENVELOPE)


def unwrap_text(
    text: str,
    strategies: Sequence[UnwrapStrategy] = DEFAULT_STRATEGIES,
    fallback: UnwrapStrategy = BRACE_SCAN,
) -> str:
    """Peel framing off *text* and return the candidate JSON document."""
    for _ in range(_MAX_DEPTH):
        strategy = next((s for s in strategies if s.matches(text)), None)
        if strategy is None:
            break
        logger.debug("Unwrapping with %s", strategy.name)
        text = strategy.unwrap(text)
    return fallback.unwrap(text)


def _cell_value(cell: Any) -> Any:
    if isinstance(cell, dict):
        return cell.get("v")
    return None


def _row_cells(row: Any) -> list[Any]:
    cells = row.get("c") if isinstance(row, dict) else None
    if not isinstance(cells, list):
        return []
    return [_cell_value(cell) for cell in cells]


def parse_table(document: str) -> SheetTable:
    try:
        payload = json.loads(document)
    except (ValueError, RecursionError) as exc:
        raise MalformedPayload("Sheet payload is not valid JSON", cause=exc) from exc

    table = payload.get("table") if isinstance(payload, dict) else None
    rows = table.get("rows") if isinstance(table, dict) else None
    if not isinstance(rows, list):
        raise MalformedPayload("Sheet payload has no table.rows")
    return SheetTable(rows=[_row_cells(row) for row in rows])


def unwrap_payload(text: str, strategies: Sequence[UnwrapStrategy] = DEFAULT_STRATEGIES) -> SheetTable:
    """Turn a raw relay body into a ``SheetTable``; raises ``MalformedPayload``."""
    table = parse_table(unwrap_text(text, strategies))
    logger.debug("Unwrapped sheet table with %d rows", len(table.rows))
    return table
