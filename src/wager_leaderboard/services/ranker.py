from collections.abc import Iterable

from wager_leaderboard.domain.prizes import PrizeTable
from wager_leaderboard.domain.record import (
    PLACEHOLDER,
    PODIUM_SIZE,
    RANKED_SIZE,
    TABLE_SIZE,
    RankedEntry,
    RankedResult,
    Record,
)


def _pad(records: list[Record], size: int) -> list[Record]:
    return records + [PLACEHOLDER] * (size - len(records))


def rank_records(records: Iterable[Record], prize_table: PrizeTable) -> RankedResult:
    """Order records by wagered amount into a 3-entry podium and 7-entry table.

    The sort is stable, so equal amounts keep their input order. Anything
    past the tenth record is dropped and missing slots are filled with the
    placeholder record. Podium entries carry no prize; table entries get
    the label ``prize_table`` assigns to their rank.
    """
    ordered = sorted(records, key=lambda record: record.wagered, reverse=True)[:RANKED_SIZE]
    podium = _pad(ordered[:PODIUM_SIZE], PODIUM_SIZE)
    table = _pad(ordered[PODIUM_SIZE:], TABLE_SIZE)
    return RankedResult(
        podium=tuple(RankedEntry(rank=index + 1, record=record) for index, record in enumerate(podium)),
        table=tuple(
            RankedEntry(rank=rank, record=record, prize=prize_table.prize_for(rank))
            for rank, record in enumerate(table, start=PODIUM_SIZE + 1)
        ),
    )
