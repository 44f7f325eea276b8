"""Configuration for the chart codec, journal store and CLI"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional
import json
import os

from chartnotes.exceptions import ConfigError
from chartnotes.timeframes import (
    ALL_TIMEFRAMES,
    DEFAULT_SELECTION,
    DEFAULT_TIMEFRAME,
    TimeframeTable,
)

ENV_PREFIX = "CHARTNOTES_"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CodecConfig:
    """Settings shared by the codec, the journal store and the CLI"""
    default_timeframe: str = DEFAULT_TIMEFRAME
    selected_timeframes: list[str] = field(default_factory=lambda: list(DEFAULT_SELECTION))
    journal_path: str = "journal/charts.json"
    log_level: str = "INFO"

    def __post_init__(self):
        known = {tf.value for tf in ALL_TIMEFRAMES}
        if self.default_timeframe not in known:
            raise ConfigError(f"Unknown default timeframe: {self.default_timeframe}")
        unknown = [tf for tf in self.selected_timeframes if tf not in known]
        if unknown:
            raise ConfigError(f"Unknown timeframes selected: {', '.join(unknown)}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")

    def table(self, filtered: bool = False) -> TimeframeTable:
        """
        Label table for this configuration.

        Decoding uses the full table so that records saved under an older
        selection still resolve; editors offer the filtered one.
        """
        table = TimeframeTable(default=self.default_timeframe)
        if filtered:
            return table.filtered(self.selected_timeframes)
        return table

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "CodecConfig":
        environ = os.environ if environ is None else environ
        kwargs = {}
        for name in ("default_timeframe", "journal_path", "log_level"):
            value = environ.get(ENV_PREFIX + name.upper())
            if value:
                kwargs[name] = value
        selected = environ.get(ENV_PREFIX + "SELECTED_TIMEFRAMES")
        if selected:
            kwargs["selected_timeframes"] = [tf.strip() for tf in selected.split(",") if tf.strip()]
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path) -> "CodecConfig":
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}") from None
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        allowed = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        return cls(**data)
