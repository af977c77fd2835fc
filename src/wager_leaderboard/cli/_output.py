from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from wager_leaderboard.config import SourceConfig
from wager_leaderboard.domain.record import LeaderboardOutcome, RankedEntry

FALLBACK_NOTICE = "Using fallback data. Unable to fetch live leaderboard."
_PODIUM_LABELS = ("1st", "2nd", "3rd")

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {escape(message)}")


def format_wagered(entry: RankedEntry, source: SourceConfig) -> str:
    if entry.record.is_placeholder:
        return "-"
    amount = entry.record.wagered
    text = f"{amount:,.0f}" if amount.is_integer() else f"{amount:,.2f}"
    return f"{source.currency_prefix}{text}{source.currency_suffix}"


def _entry_to_dict(entry: RankedEntry, source: SourceConfig) -> dict[str, Any]:
    return {
        "rank": entry.rank,
        "username": entry.record.username,
        "wagered": entry.record.wagered,
        "display": format_wagered(entry, source),
        "prize": entry.prize,
        "placeholder": entry.record.is_placeholder,
    }


def outcome_to_dict(outcome: LeaderboardOutcome, source: SourceConfig) -> dict[str, Any]:
    return {
        "source": outcome.source,
        "title": source.title,
        "degraded": outcome.degraded,
        "notice": FALLBACK_NOTICE if outcome.degraded else None,
        "podium": [_entry_to_dict(entry, source) for entry in outcome.result.podium],
        "table": [_entry_to_dict(entry, source) for entry in outcome.result.table],
    }


class RichLeaderboardRenderer:
    """Print a leaderboard outcome as a podium and a ranked table."""

    def __init__(self, source: SourceConfig, out: Console = console) -> None:
        self._source = source
        self._console = out

    def render(self, outcome: LeaderboardOutcome) -> None:
        self._console.print(Text.assemble((self._source.title, "bold"), " leaderboard"))
        if outcome.degraded:
            self._console.print(f"[yellow]{FALLBACK_NOTICE}[/yellow]")

        for label, entry in zip(_PODIUM_LABELS, outcome.result.podium):
            self._console.print(
                Text.assemble("  ", (label, "bold"), " ", entry.record.username, "  ", format_wagered(entry, self._source))
            )

        table = Table(show_edge=False, pad_edge=False)
        table.add_column("Rank", justify="right")
        table.add_column("Username")
        table.add_column("Wagered", justify="right")
        table.add_column("Prize", justify="right")
        for entry in outcome.result.table:
            table.add_row(
                str(entry.rank),
                Text(entry.record.username),
                format_wagered(entry, self._source),
                entry.prize or "-",
            )
        self._console.print(table)


class JsonLeaderboardRenderer:
    def __init__(self, source: SourceConfig, out: Console = console) -> None:
        self._source = source
        self._console = out

    def render(self, outcome: LeaderboardOutcome) -> None:
        self._console.print_json(data=outcome_to_dict(outcome, self._source))
