import pytest

from wager_leaderboard.domain.prizes import BETBOLT_PRIZES, DICEBLOX_PRIZES, PrizeTable
from wager_leaderboard.domain.record import PLACEHOLDER, Record
from wager_leaderboard.services.fallback import BETBOLT_FALLBACK, DICEBLOX_FALLBACK
from wager_leaderboard.services.ranker import rank_records


def _records(count: int) -> list[Record]:
    # Amounts deliberately out of order.
    return [Record(username=f"user{i}", wagered=float((i * 37) % 101)) for i in range(count)]


class TestShape:
    @pytest.mark.parametrize("count", [0, 1, 5, 10, 15])
    def test_always_three_plus_seven(self, count: int) -> None:
        result = rank_records(_records(count), DICEBLOX_PRIZES)
        assert len(result.podium) == 3
        assert len(result.table) == 7

    def test_empty_input_is_all_placeholders(self) -> None:
        result = rank_records([], BETBOLT_PRIZES)
        assert all(entry.record == PLACEHOLDER for entry in result.entries)

    def test_ranks(self) -> None:
        result = rank_records(_records(4), DICEBLOX_PRIZES)
        assert [e.rank for e in result.podium] == [1, 2, 3]
        assert [e.rank for e in result.table] == [4, 5, 6, 7, 8, 9, 10]

    def test_accepts_any_iterable(self) -> None:
        result = rank_records(iter(_records(3)), DICEBLOX_PRIZES)
        assert all(not e.record.is_placeholder for e in result.podium)


class TestOrdering:
    @pytest.mark.parametrize("count", [1, 5, 10, 15])
    def test_non_increasing_with_placeholders_last(self, count: int) -> None:
        entries = list(rank_records(_records(count), DICEBLOX_PRIZES).entries)
        real = [e.record.wagered for e in entries if not e.record.is_placeholder]
        assert real == sorted(real, reverse=True)
        flags = [e.record.is_placeholder for e in entries]
        assert flags == sorted(flags)

    def test_placeholders_follow_real_zero_amounts(self) -> None:
        entries = list(rank_records([Record(username="zero", wagered=0.0)], DICEBLOX_PRIZES).entries)
        assert entries[0].record.username == "zero"
        assert all(e.record == PLACEHOLDER for e in entries[1:])

    def test_stable_for_equal_amounts(self) -> None:
        records = [
            Record(username="first", wagered=50.0),
            Record(username="big", wagered=90.0),
            Record(username="second", wagered=50.0),
            Record(username="third", wagered=50.0),
        ]
        names = [e.record.username for e in rank_records(records, DICEBLOX_PRIZES).entries][:4]
        assert names == ["big", "first", "second", "third"]

    def test_keeps_only_top_ten(self) -> None:
        records = [Record(username=f"u{i}", wagered=float(i)) for i in range(15)]
        entries = list(rank_records(records, DICEBLOX_PRIZES).entries)
        assert [e.record.wagered for e in entries] == [float(i) for i in range(14, 4, -1)]

    def test_does_not_mutate_input(self) -> None:
        records = _records(6)
        snapshot = list(records)
        rank_records(records, DICEBLOX_PRIZES)
        assert records == snapshot

    def test_keeps_duplicate_usernames(self) -> None:
        records = [Record(username="Al", wagered=1.0), Record(username="Al", wagered=2.0)]
        names = [e.record.username for e in rank_records(records, DICEBLOX_PRIZES).podium]
        assert names == ["Al", "Al", "-"]


class TestPrizes:
    def test_podium_has_no_prize(self) -> None:
        result = rank_records(_records(10), BETBOLT_PRIZES)
        assert [e.prize for e in result.podium] == [None, None, None]

    @pytest.mark.parametrize(
        ("prizes", "expected"),
        [
            (DICEBLOX_PRIZES, ["$25", "$25", "-", "-", "-", "-", "-"]),
            (BETBOLT_PRIZES, ["$50", "$50", "-", "-", "-", "-", "-"]),
        ],
    )
    def test_table_prizes_by_rank(self, prizes: PrizeTable, expected: list[str]) -> None:
        result = rank_records(_records(10), prizes)
        assert [e.prize for e in result.table] == expected

    def test_placeholder_rows_still_get_rank_prize(self) -> None:
        result = rank_records([], DICEBLOX_PRIZES)
        assert result.table[0].prize == "$25"


class TestFallbackDatasets:
    @pytest.mark.parametrize("dataset", [DICEBLOX_FALLBACK, BETBOLT_FALLBACK])
    def test_ten_records_already_descending(self, dataset: tuple[Record, ...]) -> None:
        assert len(dataset) == 10
        amounts = [r.wagered for r in dataset]
        assert amounts == sorted(amounts, reverse=True)

    def test_ranking_preserves_fallback_order(self) -> None:
        result = rank_records(DICEBLOX_FALLBACK, DICEBLOX_PRIZES)
        assert tuple(e.record for e in result.entries) == DICEBLOX_FALLBACK
        assert result.podium[0].record == Record(username="Player1", wagered=5000.0)

    def test_betbolt_amounts(self) -> None:
        assert [r.wagered for r in BETBOLT_FALLBACK] == [
            10000.0, 8500.0, 7000.0, 5500.0, 4000.0, 3000.0, 2000.0, 1500.0, 1000.0, 500.0,
        ]
