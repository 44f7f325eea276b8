"""Chart Notes - chart annotation codec for trading journal records"""

__version__ = "0.1.0"
__author__ = "Chart Notes Team"

from chartnotes.timeframes import TimeframeTable, DEFAULT_TABLE
from chartnotes.codec import ChartCodec, PhasedChartCodec, ChartEntry, ChartNotes

__all__ = [
    "TimeframeTable",
    "DEFAULT_TABLE",
    "ChartCodec",
    "PhasedChartCodec",
    "ChartEntry",
    "ChartNotes",
]
