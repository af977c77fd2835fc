"""Acquisition shapes: how a configured source turns relay traffic into records."""

import logging
from typing import Protocol
from urllib.parse import urlencode

from wager_leaderboard.config import PAIRED_SHAPE, SourceConfig
from wager_leaderboard.domain.record import Record
from wager_leaderboard.domain.result import Acquisition, Err, Ok
from wager_leaderboard.ingest.errors import AcquisitionError
from wager_leaderboard.ingest.extract import extract_paired_columns, extract_sheet_rows
from wager_leaderboard.ingest.relay import RelayEndpoint, RelayFetcher
from wager_leaderboard.ingest.unwrap import unwrap_payload

logger = logging.getLogger(__name__)

_GVIZ_BASE_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq"
_XHR_HEADERS = {"X-Requested-With": "XMLHttpRequest"}


def gviz_url(sheet_id: str, *, sheet: str | None = None, cell_range: str | None = None) -> str:
    """Build the visualization-query URL returning a sheet (or a range of it) as JSON."""
    params = {"tqx": "out:json"}
    if sheet is not None:
        params["sheet"] = sheet
    if cell_range is not None:
        params["range"] = cell_range
    return f"{_GVIZ_BASE_URL.format(sheet_id=sheet_id)}?{urlencode(params, safe=':')}"


class Acquirer(Protocol):
    def acquire(self, fetcher: RelayFetcher) -> Acquisition: ...


class PairedColumnAcquirer:
    """Fetch a username range and a wagered range through one relay and zip them."""

    def __init__(self, relay: RelayEndpoint, usernames_url: str, wagered_url: str) -> None:
        self._relay = relay
        self._usernames_url = usernames_url
        self._wagered_url = wagered_url

    def acquire(self, fetcher: RelayFetcher) -> Acquisition:
        try:
            usernames, wagered = fetcher.fetch_each([self._usernames_url, self._wagered_url], self._relay)
            records = list(extract_paired_columns(unwrap_payload(usernames.text), unwrap_payload(wagered.text)))
        except AcquisitionError as exc:
            return Err(exc)
        logger.info("Extracted %d paired records", len(records))
        return Ok(records)


class SheetAcquirer:
    """Fetch a whole sheet from the first relay that answers and read two of its columns."""

    def __init__(
        self,
        relays: list[RelayEndpoint],
        sheet_url: str,
        username_column: int = 3,
        wagered_column: int = 2,
    ) -> None:
        self._relays = relays
        self._sheet_url = sheet_url
        self._username_column = username_column
        self._wagered_column = wagered_column

    def acquire(self, fetcher: RelayFetcher) -> Acquisition:
        try:
            response = fetcher.fetch_first(self._sheet_url, self._relays, headers=_XHR_HEADERS)
            table = unwrap_payload(response.text)
        except AcquisitionError as exc:
            return Err(exc)
        records = list(extract_sheet_rows(table, self._username_column, self._wagered_column))
        logger.info("Extracted %d of %d sheet rows", len(records), max(len(table.rows) - 1, 0))
        return Ok(records)


def build_acquirer(source: SourceConfig) -> Acquirer:
    relays = [RelayEndpoint(template) for template in source.relays]
    if source.shape == PAIRED_SHAPE:
        assert source.username_range is not None and source.wagered_range is not None
        return PairedColumnAcquirer(
            relay=relays[0],
            usernames_url=gviz_url(source.sheet_id, cell_range=source.username_range),
            wagered_url=gviz_url(source.sheet_id, cell_range=source.wagered_range),
        )
    return SheetAcquirer(
        relays=relays,
        sheet_url=gviz_url(source.sheet_id, sheet=source.sheet_name),
        username_column=source.username_column,
        wagered_column=source.wagered_column,
    )
