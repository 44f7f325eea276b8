"""Chart annotation codec"""

from chartnotes.codec.entry import ChartEntry, ChartNotes
from chartnotes.codec.codec import ChartCodec, Segment, parse_segments, split_segments
from chartnotes.codec.phased import ChartPhase, PhasedChartCodec, PhasedCharts

__all__ = [
    "ChartEntry",
    "ChartNotes",
    "ChartCodec",
    "Segment",
    "parse_segments",
    "split_segments",
    "ChartPhase",
    "PhasedChartCodec",
    "PhasedCharts",
]
