import logging
import threading
from collections.abc import Sequence
from typing import Protocol

from wager_leaderboard.domain.prizes import PrizeTable
from wager_leaderboard.domain.record import LeaderboardOutcome, Record
from wager_leaderboard.domain.result import Err, Ok
from wager_leaderboard.ingest.relay import RelayFetcher
from wager_leaderboard.services.ranker import rank_records
from wager_leaderboard.services.sources import Acquirer

logger = logging.getLogger(__name__)


class LeaderboardRenderer(Protocol):
    def render(self, outcome: LeaderboardOutcome) -> None: ...


class LeaderboardPipeline:
    """Acquire, rank and hand over one leaderboard, falling back to static data.

    Transport and payload failures never escape ``run``: the fallback
    dataset is ranked instead and the outcome is marked degraded. An empty
    but well-formed sheet is not a failure and ranks to placeholders.
    Overlapping runs on the same pipeline are serialised.
    """

    def __init__(
        self,
        name: str,
        acquirer: Acquirer,
        fetcher: RelayFetcher,
        prize_table: PrizeTable,
        fallback: Sequence[Record],
    ) -> None:
        self._name = name
        self._acquirer = acquirer
        self._fetcher = fetcher
        self._prize_table = prize_table
        self._fallback = tuple(fallback)
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def run(self) -> LeaderboardOutcome:
        with self._lock:
            logger.info("Refreshing %s leaderboard", self._name)
            match self._acquirer.acquire(self._fetcher):
                case Ok(records):
                    return LeaderboardOutcome(source=self._name, result=rank_records(records, self._prize_table))
                case Err(error):
                    logger.warning("Using fallback data for %s: %s", self._name, error)
                    return LeaderboardOutcome(
                        source=self._name,
                        result=rank_records(self._fallback, self._prize_table),
                        degraded=True,
                        error=str(error),
                    )

    def run_and_render(self, renderer: LeaderboardRenderer) -> LeaderboardOutcome:
        outcome = self.run()
        renderer.render(outcome)
        return outcome
