from collections.abc import Mapping
from types import MappingProxyType

from wager_leaderboard.domain.record import Record


def _dataset(amounts: tuple[float, ...]) -> tuple[Record, ...]:
    return tuple(
        Record(username=f"Player{index}", wagered=float(amount)) for index, amount in enumerate(amounts, start=1)
    )


DICEBLOX_FALLBACK = _dataset((5000, 4500, 4000, 3500, 3000, 2500, 2000, 1500, 1000, 500))
BETBOLT_FALLBACK = _dataset((10000, 8500, 7000, 5500, 4000, 3000, 2000, 1500, 1000, 500))

FALLBACK_DATASETS: Mapping[str, tuple[Record, ...]] = MappingProxyType(
    {"diceblox": DICEBLOX_FALLBACK, "betbolt": BETBOLT_FALLBACK}
)
