import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Self
from urllib.parse import quote

import httpx

from wager_leaderboard.ingest._retry import relay_retry
from wager_leaderboard.ingest.errors import TransportFailure

logger = logging.getLogger(__name__)

URL_PLACEHOLDER = "{url}"
# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_DEFAULT_RETRY = relay_retry("relay request")


@dataclass(frozen=True)
class RelayEndpoint:
    """A CORS-style proxy that forwards a request to the real sheet URL.

    ``template`` holds ``{url}`` where the percent-encoded target goes, e.g.
    ``https://api.allorigins.win/raw?url={url}``.
    """

    template: str

    def __post_init__(self) -> None:
        if URL_PLACEHOLDER not in self.template:
            raise ValueError(f"Relay template {self.template!r} has no {URL_PLACEHOLDER} placeholder")

    def build(self, target_url: str) -> str:
        return self.template.replace(URL_PLACEHOLDER, quote(target_url, safe=_URI_COMPONENT_SAFE))


@dataclass(frozen=True)
class RelayResponse:
    relay: str
    status_code: int
    text: str


class RelayFetcher:
    """Sends sheet queries through relay endpoints, one request at a time."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        retry: Callable[[Callable[..., Any]], Callable[..., Any]] = _DEFAULT_RETRY,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(15.0, connect=10.0), follow_redirects=True)
        self._get_with_retry = retry(self._do_get)

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _do_get(self, url: str, headers: Mapping[str, str] | None) -> httpx.Response:
        response = self._client.get(url, headers=headers)
        response.raise_for_status()
        return response

    def fetch_first(
        self,
        query_url: str,
        relays: Iterable[RelayEndpoint],
        headers: Mapping[str, str] | None = None,
    ) -> RelayResponse:
        """Try each relay in order and return the first successful response.

        Relays that raise or answer with a non-2xx status are skipped.
        Raises ``TransportFailure`` once every relay has been tried.
        """
        last_error: Exception | None = None
        tried = 0
        for relay in relays:
            tried += 1
            logger.debug("Trying relay %s for %s", relay.template, query_url)
            try:
                response = self._get_with_retry(relay.build(query_url), headers)
            except httpx.HTTPError as exc:
                logger.warning("Relay %s failed: %s", relay.template, exc)
                last_error = exc
                continue
            logger.info("Relay %s answered %d", relay.template, response.status_code)
            return RelayResponse(relay=relay.template, status_code=response.status_code, text=response.text)

        if tried == 0:
            raise TransportFailure("No relays configured")
        raise TransportFailure(f"All {tried} relays failed", cause=last_error)

    def fetch_each(
        self,
        query_urls: Iterable[str],
        relay: RelayEndpoint,
        headers: Mapping[str, str] | None = None,
    ) -> list[RelayResponse]:
        """Send every query through the one relay; any failure aborts the batch."""
        responses: list[RelayResponse] = []
        for query_url in query_urls:
            logger.debug("GET %s via %s", query_url, relay.template)
            try:
                response = self._get_with_retry(relay.build(query_url), headers)
            except httpx.HTTPError as exc:
                raise TransportFailure(f"Relay {relay.template} failed for {query_url}", cause=exc) from exc
            responses.append(
                RelayResponse(relay=relay.template, status_code=response.status_code, text=response.text)
            )
        logger.info("Fetched %d ranges via %s", len(responses), relay.template)
        return responses
