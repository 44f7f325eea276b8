"""Two-Phase Chart Codec

Trade chart analysis is kept as two groups, the chart before the trade and
the chart after it, stored in one notes field:

    [Before - 4 Hours]
    setup

    [After - 1 Hour]
    result

Images are stored as before images followed by after images.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional
import re

from loguru import logger

from chartnotes.codec.codec import ChartCodec, BLOCK_SEPARATOR, parse_segments
from chartnotes.codec.entry import ChartEntry, ChartNotes


class ChartPhase(Enum):
    BEFORE = "Before"
    AFTER = "After"


PHASE_PATTERNS = {
    ChartPhase.BEFORE: re.compile(r"^before\b\s*-?\s*(.*)", re.IGNORECASE),
    ChartPhase.AFTER: re.compile(r"^after\b\s*-?\s*(.*)", re.IGNORECASE),
}


@dataclass
class PhasedCharts:
    """Decoded before/after groups of a trade's chart analysis"""
    before: list[ChartEntry] = field(default_factory=list)
    after: list[ChartEntry] = field(default_factory=list)

    def group(self, phase: ChartPhase) -> list[ChartEntry]:
        return self.before if phase is ChartPhase.BEFORE else self.after


def split_phase_label(label: str) -> tuple[Optional[ChartPhase], str]:
    """
    Separate the group prefix from a header label.

    "Before - 5 Minutes" -> (BEFORE, "5 Minutes"). Labels without a prefix
    come back with phase None and the label untouched.
    """
    for phase, pattern in PHASE_PATTERNS.items():
        match = pattern.match(label)
        if match:
            return phase, match.group(1).strip() or label
    return None, label


def split_images(images: list[str], before_count: int, after_count: int) -> tuple[list[str], list[str]]:
    """Slice the flat image list between the two groups"""
    if before_count and after_count:
        return images[:before_count], images[before_count:]
    if after_count:
        return [], images
    return images, []


class PhasedChartCodec:
    """
    Before/after variant of the chart codec.

    Each group is encoded like a plain chart field with its phase written in
    front of the timeframe label.
    """

    def __init__(self, codec: Optional[ChartCodec] = None):
        self.codec = codec or ChartCodec()

    @property
    def table(self):
        return self.codec.table

    def default_charts(self) -> PhasedCharts:
        return PhasedCharts(before=self.codec.default_entries(), after=self.codec.default_entries())

    def encode(self, before: Iterable[ChartEntry], after: Iterable[ChartEntry]) -> ChartNotes:
        encoded_before = self.codec.encode(before, prefix=ChartPhase.BEFORE.value)
        encoded_after = self.codec.encode(after, prefix=ChartPhase.AFTER.value)

        notes = BLOCK_SEPARATOR.join(
            blob for blob in (encoded_before.notes, encoded_after.notes) if blob
        )
        return ChartNotes(notes=notes, images=encoded_before.images + encoded_after.images)

    def encode_charts(self, charts: PhasedCharts) -> ChartNotes:
        return self.encode(charts.before, charts.after)

    def decode(self, notes: Optional[str], images: Optional[Iterable[str]] = None) -> PhasedCharts:
        notes = notes or ""
        images = list(images or [])

        if not notes and not images:
            return self.default_charts()

        before: list[ChartEntry] = []
        after: list[ChartEntry] = []

        for segment in parse_segments(notes):
            if segment.label is None:
                before.append(self.codec.entry_from_segment(segment))
                continue

            phase, timeframe_label = split_phase_label(segment.label)
            entry = self.codec.entry_from_segment(segment, label=timeframe_label)
            if phase is ChartPhase.AFTER:
                after.append(entry)
            else:
                if phase is None:
                    logger.debug(f"Header {segment.label!r} has no phase, treated as before")
                before.append(entry)

        before_images, after_images = split_images(images, len(before), len(after))

        before = self.codec.attach_images(before, before_images)
        after = self.codec.attach_images(after, after_images)

        return PhasedCharts(
            before=before or self.codec.default_entries(),
            after=after or self.codec.default_entries(),
        )

    def decode_notes(self, stored: ChartNotes) -> PhasedCharts:
        return self.decode(stored.notes, stored.images)
