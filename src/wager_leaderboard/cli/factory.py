from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from wager_leaderboard.config import Settings
from wager_leaderboard.domain.prizes import PRIZE_TABLES
from wager_leaderboard.ingest._retry import relay_retry
from wager_leaderboard.ingest.relay import RelayFetcher
from wager_leaderboard.services.fallback import FALLBACK_DATASETS
from wager_leaderboard.services.pipeline import LeaderboardPipeline
from wager_leaderboard.services.sources import build_acquirer


def create_client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(settings.http.timeout_seconds, connect=min(10.0, settings.http.timeout_seconds)),
        follow_redirects=True,
    )


def build_fetcher(settings: Settings, client: httpx.Client) -> RelayFetcher:
    return RelayFetcher(client, retry=relay_retry("relay request", attempts=settings.http.attempts_per_relay))


def build_pipeline(settings: Settings, name: str, fetcher: RelayFetcher) -> LeaderboardPipeline:
    source = settings.source(name)
    return LeaderboardPipeline(
        name=source.name,
        acquirer=build_acquirer(source),
        fetcher=fetcher,
        prize_table=PRIZE_TABLES[source.prize_table],
        fallback=FALLBACK_DATASETS[source.fallback],
    )


@contextmanager
def build_pipelines(settings: Settings, client: httpx.Client | None = None) -> Iterator[dict[str, LeaderboardPipeline]]:
    """Yield one pipeline per configured leaderboard sharing a single HTTP client."""
    owns_client = client is None
    http_client = client or create_client(settings)
    try:
        fetcher = build_fetcher(settings, http_client)
        yield {name: build_pipeline(settings, name, fetcher) for name in settings.sources}
    finally:
        if owns_client:
            http_client.close()
