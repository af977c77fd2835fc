from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from wager_leaderboard.domain.prizes import PRIZE_TABLES
from wager_leaderboard.ingest.relay import URL_PLACEHOLDER
from wager_leaderboard.services.fallback import FALLBACK_DATASETS

if TYPE_CHECKING:
    from collections.abc import Iterable

SHEET_SHAPE = "sheet"
PAIRED_SHAPE = "paired"
_SHAPES = (SHEET_SHAPE, PAIRED_SHAPE)

_DEFAULTS: dict[str, object] = {
    "http": {
        "timeout_seconds": 15.0,
        "attempts_per_relay": 1,
    },
    "leaderboards": ["diceblox", "betbolt"],
    "sources": {
        "diceblox": {
            "title": "Diceblox",
            "shape": SHEET_SHAPE,
            "sheet_id": "1B2uro1WbyaxLGVmohk_N7vX1qXXGCO4Ys191mg3sTgs",
            "sheet_name": "Sheet1",
            "relays": [
                "https://api.allorigins.win/raw?url={url}",
                "https://cors-anywhere.herokuapp.com/{url}",
                "https://api.codetabs.com/v1/proxy?quest={url}",
            ],
            "username_column": 3,
            "wagered_column": 2,
            "prize_table": "diceblox",
            "fallback": "diceblox",
            "currency_prefix": "",
            "currency_suffix": " coins",
        },
        "betbolt": {
            "title": "BetBolt",
            "shape": PAIRED_SHAPE,
            "sheet_id": "1dbe2pJq8HXEYHwy0PwsXWluK8OpREOibnatklDaAHR4",
            "relays": ["https://api.allorigins.win/raw?url={url}"],
            "username_range": "A2:A50",
            "wagered_range": "B2:B50",
            "prize_table": "betbolt",
            "fallback": "betbolt",
            "currency_prefix": "$",
            "currency_suffix": "",
        },
    },
}


class SettingsError(Exception):
    """Raised when leaderboard configuration is invalid."""


@dataclass(frozen=True)
class HttpSettings:
    timeout_seconds: float = 15.0
    attempts_per_relay: int = 1


@dataclass(frozen=True)
class SourceConfig:
    name: str
    title: str
    shape: str
    sheet_id: str
    relays: tuple[str, ...]
    prize_table: str
    fallback: str
    sheet_name: str | None = None
    username_range: str | None = None
    wagered_range: str | None = None
    username_column: int = 3
    wagered_column: int = 2
    currency_prefix: str = ""
    currency_suffix: str = ""


@dataclass(frozen=True)
class Settings:
    http: HttpSettings
    sources: dict[str, SourceConfig]

    def source(self, name: str) -> SourceConfig:
        if name not in self.sources:
            raise SettingsError(f"Unknown leaderboard '{name}' (known: {', '.join(sorted(self.sources))})")
        return self.sources[name]


def create_config(
    yaml_path: str = "wlb.yaml",
    env_prefix: str = "WLB",
    defaults: dict[str, object] | None = None,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def _as_list(value: object) -> list[str]:
    # Env vars arrive as comma-separated strings.
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item) for item in cast("Iterable[object]", value)]


def _optional_str(cfg: ConfigurationSet, key: str) -> str | None:
    value = cfg.get(key, None)
    return None if value is None else str(value)


def _require(cfg: ConfigurationSet, key: str) -> object:
    value = cfg.get(key, None)
    if value is None:
        raise SettingsError(f"Missing required setting '{key}'")
    return value


def _int_setting(cfg: ConfigurationSet, key: str, default: int) -> int:
    try:
        return int(str(cfg.get(key, default)))
    except ValueError:
        raise SettingsError(f"Setting '{key}' must be an integer")


def validate_source(source: SourceConfig) -> None:
    context = f"Leaderboard '{source.name}'"
    if source.shape not in _SHAPES:
        raise SettingsError(f"{context}: invalid shape '{source.shape}'")
    if not source.relays:
        raise SettingsError(f"{context}: at least one relay is required")
    if source.shape == PAIRED_SHAPE and len(source.relays) != 1:
        raise SettingsError(f"{context}: paired shape uses exactly one relay, got {len(source.relays)}")
    for relay in source.relays:
        if URL_PLACEHOLDER not in relay:
            raise SettingsError(f"{context}: relay '{relay}' has no {URL_PLACEHOLDER} placeholder")
    if source.prize_table not in PRIZE_TABLES:
        raise SettingsError(f"{context}: unknown prize table '{source.prize_table}'")
    if source.fallback not in FALLBACK_DATASETS:
        raise SettingsError(f"{context}: unknown fallback dataset '{source.fallback}'")
    if source.shape == PAIRED_SHAPE and (source.username_range is None or source.wagered_range is None):
        raise SettingsError(f"{context}: paired shape requires username_range and wagered_range")
    if source.username_column < 0 or source.wagered_column < 0:
        raise SettingsError(f"{context}: column indexes must be >= 0")


def _load_source(cfg: ConfigurationSet, name: str) -> SourceConfig:
    prefix = f"sources.{name}"
    source = SourceConfig(
        name=name,
        title=str(cfg.get(f"{prefix}.title", name)),
        shape=str(_require(cfg, f"{prefix}.shape")),
        sheet_id=str(_require(cfg, f"{prefix}.sheet_id")),
        relays=tuple(_as_list(_require(cfg, f"{prefix}.relays"))),
        prize_table=str(cfg.get(f"{prefix}.prize_table", name)),
        fallback=str(cfg.get(f"{prefix}.fallback", name)),
        sheet_name=_optional_str(cfg, f"{prefix}.sheet_name"),
        username_range=_optional_str(cfg, f"{prefix}.username_range"),
        wagered_range=_optional_str(cfg, f"{prefix}.wagered_range"),
        username_column=_int_setting(cfg, f"{prefix}.username_column", 3),
        wagered_column=_int_setting(cfg, f"{prefix}.wagered_column", 2),
        currency_prefix=str(cfg.get(f"{prefix}.currency_prefix", "")),
        currency_suffix=str(cfg.get(f"{prefix}.currency_suffix", "")),
    )
    validate_source(source)
    return source


def load_settings(cfg: ConfigurationSet | None = None) -> Settings:
    """Freeze the layered configuration into a ``Settings`` value."""
    if cfg is None:
        cfg = create_config()

    try:
        timeout_seconds = float(str(cfg.get("http.timeout_seconds", 15.0)))
    except ValueError:
        raise SettingsError("Setting 'http.timeout_seconds' must be a number")
    if timeout_seconds <= 0:
        raise SettingsError(f"http.timeout_seconds must be > 0, got {timeout_seconds}")
    attempts = _int_setting(cfg, "http.attempts_per_relay", 1)
    if attempts < 1:
        raise SettingsError(f"http.attempts_per_relay must be >= 1, got {attempts}")

    names = _as_list(_require(cfg, "leaderboards"))
    if not names:
        raise SettingsError("No leaderboards configured")
    sources = {name: _load_source(cfg, name) for name in names}

    return Settings(
        http=HttpSettings(timeout_seconds=timeout_seconds, attempts_per_relay=attempts),
        sources=sources,
    )
