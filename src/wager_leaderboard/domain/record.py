import math
from collections.abc import Iterator
from dataclasses import dataclass

PODIUM_SIZE = 3
TABLE_SIZE = 7
RANKED_SIZE = PODIUM_SIZE + TABLE_SIZE


@dataclass(frozen=True, slots=True)
class Record:
    """One leaderboard row: who wagered and how much."""

    username: str
    wagered: float

    def __post_init__(self) -> None:
        if not self.username or self.username != self.username.strip():
            raise ValueError(f"username must be non-empty and trimmed, got {self.username!r}")
        if not math.isfinite(self.wagered) or self.wagered < 0:
            raise ValueError(f"wagered must be finite and >= 0, got {self.wagered!r}")

    @property
    def is_placeholder(self) -> bool:
        return self == PLACEHOLDER


PLACEHOLDER = Record(username="-", wagered=0.0)


@dataclass(frozen=True, slots=True)
class RankedEntry:
    rank: int
    record: Record
    prize: str | None = None


@dataclass(frozen=True, slots=True)
class RankedResult:
    podium: tuple[RankedEntry, ...]
    table: tuple[RankedEntry, ...]

    def __post_init__(self) -> None:
        if len(self.podium) != PODIUM_SIZE:
            raise ValueError(f"podium must hold {PODIUM_SIZE} entries, got {len(self.podium)}")
        if len(self.table) != TABLE_SIZE:
            raise ValueError(f"table must hold {TABLE_SIZE} entries, got {len(self.table)}")

    @property
    def entries(self) -> Iterator[RankedEntry]:
        yield from self.podium
        yield from self.table


@dataclass(frozen=True, slots=True)
class LeaderboardOutcome:
    """What a pipeline run hands to the rendering side.

    ``degraded`` is set when the fallback dataset populated the result;
    ``error`` then describes why live data was unavailable.
    """

    source: str
    result: RankedResult
    degraded: bool = False
    error: str | None = None
