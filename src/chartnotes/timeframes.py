"""Timeframe Label Table

Bidirectional mapping between short timeframe tokens ("4h") and the
display labels ("4 Hours") written into chart note headers.
"""

from dataclasses import dataclass
from typing import Iterable, Optional


DEFAULT_TIMEFRAME = "4h"

# Tokens offered when the user has not picked any
DEFAULT_SELECTION = ["1m", "5m", "15m", "30m", "1h", "4h", "1d", "1w"]


@dataclass(frozen=True)
class Timeframe:
    """A single selectable chart timeframe"""
    value: str
    label: str


ALL_TIMEFRAMES = [
    # Seconds
    Timeframe("1s", "1 Second"),
    Timeframe("5s", "5 Seconds"),
    Timeframe("10s", "10 Seconds"),
    Timeframe("15s", "15 Seconds"),
    Timeframe("30s", "30 Seconds"),
    # Minutes
    Timeframe("1m", "1 Minute"),
    Timeframe("2m", "2 Minutes"),
    Timeframe("3m", "3 Minutes"),
    Timeframe("4m", "4 Minutes"),
    Timeframe("5m", "5 Minutes"),
    Timeframe("6m", "6 Minutes"),
    Timeframe("7m", "7 Minutes"),
    Timeframe("8m", "8 Minutes"),
    Timeframe("9m", "9 Minutes"),
    Timeframe("10m", "10 Minutes"),
    Timeframe("11m", "11 Minutes"),
    Timeframe("12m", "12 Minutes"),
    Timeframe("13m", "13 Minutes"),
    Timeframe("14m", "14 Minutes"),
    Timeframe("15m", "15 Minutes"),
    Timeframe("20m", "20 Minutes"),
    Timeframe("30m", "30 Minutes"),
    Timeframe("45m", "45 Minutes"),
    # Hours
    Timeframe("1h", "1 Hour"),
    Timeframe("2h", "2 Hours"),
    Timeframe("3h", "3 Hours"),
    Timeframe("4h", "4 Hours"),
    Timeframe("6h", "6 Hours"),
    Timeframe("8h", "8 Hours"),
    Timeframe("12h", "12 Hours"),
    # Days
    Timeframe("1d", "1 Day"),
    Timeframe("2d", "2 Days"),
    Timeframe("3d", "3 Days"),
    # Weeks
    Timeframe("1w", "1 Week"),
    Timeframe("2w", "2 Weeks"),
    # Months
    Timeframe("1M", "1 Month"),
    Timeframe("2M", "2 Months"),
    Timeframe("3M", "3 Months"),
    Timeframe("4M", "4 Months"),
    Timeframe("6M", "6 Months"),
    Timeframe("12M", "1 Year"),
]


class TimeframeTable:
    """
    Lookup table used by the chart codec.

    Tokens are case-sensitive ("1m" is a minute, "1M" a month). Labels are
    matched exactly, which is how they are written by encode.
    """

    def __init__(
        self,
        timeframes: Optional[Iterable[Timeframe]] = None,
        default: str = DEFAULT_TIMEFRAME,
    ):
        self._timeframes = list(ALL_TIMEFRAMES if timeframes is None else timeframes)
        self._labels = {tf.value: tf.label for tf in self._timeframes}
        self._tokens = {}
        for tf in self._timeframes:
            self._tokens.setdefault(tf.label, tf.value)

        if default not in self._labels:
            raise ValueError(f"Default timeframe {default!r} is not in the table")
        self.default = default

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]], default: str = DEFAULT_TIMEFRAME) -> "TimeframeTable":
        return cls([Timeframe(value, label) for value, label in pairs], default=default)

    def __len__(self) -> int:
        return len(self._timeframes)

    def __contains__(self, token: object) -> bool:
        return token in self._labels

    def label(self, token: Optional[str]) -> str:
        """Display label for a token; unknown tokens are shown as-is"""
        if token is None:
            return self._labels[self.default]
        return self._labels.get(token, token)

    def token(self, label: str) -> Optional[str]:
        """Reverse lookup, None when the label is unknown"""
        return self._tokens.get(label)

    def resolve(self, label: str) -> str:
        """Reverse lookup falling back to the default token"""
        return self._tokens.get(label, self.default)

    def choices(self) -> list[tuple[str, str]]:
        return [(tf.value, tf.label) for tf in self._timeframes]

    def filtered(self, selected: Iterable[str]) -> "TimeframeTable":
        """
        Sub-table holding only the user's selected tokens, in table order.

        The default token is kept when the selection omits it so that the
        result stays a valid table.
        """
        wanted = set(selected)
        keep = [tf for tf in self._timeframes if tf.value in wanted or tf.value == self.default]
        return TimeframeTable(keep, default=self.default)


DEFAULT_TABLE = TimeframeTable()
