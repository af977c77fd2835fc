from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

NO_PRIZE = "-"


@dataclass(frozen=True)
class PrizeTable:
    name: str
    prizes: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "prizes", MappingProxyType(dict(self.prizes)))

    def prize_for(self, rank: int) -> str:
        return self.prizes.get(rank, NO_PRIZE)


DICEBLOX_PRIZES = PrizeTable(
    name="diceblox",
    prizes={1: "$200", 2: "$100", 3: "$50", 4: "$25", 5: "$25"},
)

BETBOLT_PRIZES = PrizeTable(
    name="betbolt",
    prizes={1: "$500", 2: "$300", 3: "$100", 4: "$50", 5: "$50"},
)

PRIZE_TABLES: Mapping[str, PrizeTable] = MappingProxyType(
    {table.name: table for table in (DICEBLOX_PRIZES, BETBOLT_PRIZES)}
)
