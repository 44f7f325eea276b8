"""
Journal records that carry chart analysis.

Handles:
- Trades (before/after chart analysis, pre-market and post-market charts)
- Backtests and playbook setups (one chart field each)
- Conversion between stored fields and editable chart entries
"""

from dataclasses import dataclass, asdict, field, fields
from datetime import datetime
from typing import Dict, List, Optional
import uuid

from chartnotes.codec import ChartCodec, ChartEntry, ChartNotes, PhasedChartCodec, PhasedCharts


def _now() -> str:
    return datetime.now().isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def _known_fields(cls, data: Dict) -> Dict:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names and value is not None}


@dataclass
class ChartRecord:
    """Record with a single chart field stored as notes + images"""
    id: str = field(default_factory=_new_id)
    name: str = ""
    folder_id: Optional[str] = None
    strategy: str = ""
    symbol: str = ""
    timeframe: str = "4h"
    notes: str = ""
    images: List[str] = field(default_factory=list)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    kind = "record"

    def charts(self, codec: Optional[ChartCodec] = None) -> List[ChartEntry]:
        """Entries for the edit form"""
        return (codec or ChartCodec()).decode(self.notes, self.images)

    def set_charts(self, entries: List[ChartEntry], codec: Optional[ChartCodec] = None) -> ChartNotes:
        """Re-encode the edited entries into the stored fields"""
        encoded = (codec or ChartCodec()).encode(entries)
        self.notes = encoded.notes
        self.images = encoded.images
        self.updated_at = _now()
        return encoded

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict):
        return cls(**_known_fields(cls, data))


@dataclass
class Backtest(ChartRecord):
    """Hypothetical test run of a strategy"""
    wins: int = 0
    losses: int = 0
    net_pnl: float = 0.0
    profit_factor: float = 0.0

    kind = "backtests"

    @property
    def total_trades(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        total = self.total_trades
        return round(self.wins / total * 100, 2) if total > 0 else 0.0


@dataclass
class PlaybookSetup(ChartRecord):
    """Reusable setup in the playbook"""
    description: str = ""
    rules: List[str] = field(default_factory=list)

    kind = "setups"


@dataclass
class Trade:
    """Logged trade with its three chart fields"""
    id: str = field(default_factory=_new_id)
    symbol: str = ""
    direction: str = "long"
    date: str = ""
    pnl_amount: float = 0.0

    # Chart analysis (before/after)
    chart_analysis_notes: str = ""
    images: List[str] = field(default_factory=list)

    pre_market_notes: str = ""
    pre_market_images: List[str] = field(default_factory=list)
    post_market_notes: str = ""
    post_market_images: List[str] = field(default_factory=list)

    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    kind = "trades"

    def chart_analysis(self, codec: Optional[PhasedChartCodec] = None) -> PhasedCharts:
        return (codec or PhasedChartCodec()).decode(self.chart_analysis_notes, self.images)

    def set_chart_analysis(
        self,
        before: List[ChartEntry],
        after: List[ChartEntry],
        codec: Optional[PhasedChartCodec] = None,
    ) -> ChartNotes:
        encoded = (codec or PhasedChartCodec()).encode(before, after)
        self.chart_analysis_notes = encoded.notes
        self.images = encoded.images
        self.updated_at = _now()
        return encoded

    def pre_market_charts(self, codec: Optional[ChartCodec] = None) -> List[ChartEntry]:
        return (codec or ChartCodec()).decode(self.pre_market_notes, self.pre_market_images)

    def set_pre_market_charts(self, entries: List[ChartEntry], codec: Optional[ChartCodec] = None) -> ChartNotes:
        encoded = (codec or ChartCodec()).encode(entries)
        self.pre_market_notes = encoded.notes
        self.pre_market_images = encoded.images
        self.updated_at = _now()
        return encoded

    def post_market_charts(self, codec: Optional[ChartCodec] = None) -> List[ChartEntry]:
        return (codec or ChartCodec()).decode(self.post_market_notes, self.post_market_images)

    def set_post_market_charts(self, entries: List[ChartEntry], codec: Optional[ChartCodec] = None) -> ChartNotes:
        encoded = (codec or ChartCodec()).encode(entries)
        self.post_market_notes = encoded.notes
        self.post_market_images = encoded.images
        self.updated_at = _now()
        return encoded

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "Trade":
        return cls(**_known_fields(cls, data))


RECORD_TYPES = {
    Trade.kind: Trade,
    Backtest.kind: Backtest,
    PlaybookSetup.kind: PlaybookSetup,
}
