import os
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from tests.helpers import ScriptedTransport, gviz_response, ok, scripted_client
from wager_leaderboard.cli._output import FALLBACK_NOTICE
from wager_leaderboard.cli.app import app

runner = CliRunner()

_NO_YAML = ["--config", "/nonexistent/wlb.yaml"]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("WLB__"):
            monkeypatch.delenv(key)


def _patch_client(monkeypatch: pytest.MonkeyPatch, script: list[httpx.Response | str]) -> ScriptedTransport:
    client, transport = scripted_client(script)
    monkeypatch.setattr("wager_leaderboard.cli.factory.create_client", lambda settings: client)
    return transport


class TestCallback:
    def test_no_command_exits_cleanly(self) -> None:
        result = runner.invoke(app, _NO_YAML)
        assert result.exit_code == 0

    def test_invalid_config_exits_1(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "wlb.yaml"
        yaml_file.write_text("http:\n  timeout_seconds: 0\n")
        result = runner.invoke(app, ["--config", str(yaml_file), "sources"])
        assert result.exit_code == 1


class TestSourcesCommand:
    def test_lists_configured_leaderboards(self) -> None:
        result = runner.invoke(app, [*_NO_YAML, "sources"])
        assert result.exit_code == 0
        assert "diceblox" in result.output
        assert "BetBolt" in result.output
        assert "paired" in result.output

    def test_yaml_subset(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "wlb.yaml"
        yaml_file.write_text("leaderboards:\n  - betbolt\n")
        result = runner.invoke(app, ["--config", str(yaml_file), "sources"])
        assert result.exit_code == 0
        assert "betbolt" in result.output
        assert "diceblox" not in result.output


class TestShowCommand:
    def test_live_sheet(self, monkeypatch: pytest.MonkeyPatch) -> None:
        rows = [["Rank", "Id", "Wagered", "User"], [1, "a", 4200, "alice"], [2, "b", 300, "bob"]]
        transport = _patch_client(monkeypatch, ["down", ok(gviz_response(rows))])
        result = runner.invoke(app, [*_NO_YAML, "show", "diceblox"])
        assert result.exit_code == 0
        assert "Diceblox leaderboard" in result.output
        assert "alice" in result.output
        assert "4,200 coins" in result.output
        assert FALLBACK_NOTICE not in result.output
        assert transport.call_count == 2

    def test_degraded_shows_notice(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_client(monkeypatch, ["down", "down", "down"])
        result = runner.invoke(app, [*_NO_YAML, "show", "diceblox"])
        assert result.exit_code == 0
        assert FALLBACK_NOTICE in result.output
        assert "Player1" in result.output

    def test_json_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_client(
            monkeypatch,
            [ok(gviz_response([["alice"], ["bob"]])), ok(gviz_response([[900], [50.5]]))],
        )
        result = runner.invoke(app, [*_NO_YAML, "show", "betbolt", "--json"])
        assert result.exit_code == 0
        assert '"source": "betbolt"' in result.output
        assert '"username": "alice"' in result.output
        assert '"display": "$50.50"' in result.output
        assert '"degraded": false' in result.output

    def test_unknown_leaderboard_exits_1(self) -> None:
        result = runner.invoke(app, [*_NO_YAML, "show", "stake"])
        assert result.exit_code == 1

    def test_bracketed_name_exits_1(self) -> None:
        result = runner.invoke(app, [*_NO_YAML, "show", "[/x]"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
