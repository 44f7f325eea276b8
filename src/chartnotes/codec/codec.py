"""Chart Annotation Codec

Multiplexes a list of chart entries (timeframe, images, notes) into the two
fields stored on a journal record:

    [4 Hours]
    Swept the Asian high, displacement down

    [15 Minutes]
    Entry on the FVG retrace

plus a flat image list whose order follows the entries. Decoding reverses
the process and never raises: text without headers is kept as an
unlabelled entry and unknown labels fall back to the default timeframe.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import re

from loguru import logger

from chartnotes.codec.entry import ChartEntry, ChartNotes
from chartnotes.timeframes import TimeframeTable, DEFAULT_TABLE


BLOCK_SEPARATOR = "\n\n"

# A header is a bracketed label alone on its line, at the start of the text
# or after a blank line
HEADER_START = re.compile(r"(?:\A|(?<=\n\n))\[[^\]\n]+\]$", re.MULTILINE)
SECTION_PATTERN = re.compile(r"^\[([^\]\n]+)\](?:\n([\s\S]*))?\Z")


@dataclass
class Segment:
    """A section of stored chart notes before timeframe resolution"""
    label: Optional[str]  # None for text outside any header
    notes: str


def split_segments(notes: str) -> list[str]:
    """
    Split stored notes into raw sections.

    Each section starts at a header and runs up to the next header or the
    end of the text. Text before the first header forms its own section.
    Blank sections are dropped.
    """
    if not notes:
        return []

    starts = [m.start() for m in HEADER_START.finditer(notes)]
    if not starts or starts[0] != 0:
        starts.insert(0, 0)
    bounds = starts + [len(notes)]

    return [
        notes[start:end]
        for start, end in zip(bounds, bounds[1:])
        if notes[start:end].strip()
    ]


def parse_segments(notes: str) -> list[Segment]:
    """Split stored notes and pull the label and body out of each section"""
    segments = []
    for raw in split_segments(notes):
        match = SECTION_PATTERN.match(raw)
        if match:
            segments.append(Segment(label=match.group(1), notes=(match.group(2) or "").strip()))
        else:
            logger.debug(f"Section without header kept as plain notes: {raw[:40]!r}")
            segments.append(Segment(label=None, notes=raw.strip()))
    return segments


class ChartCodec:
    """
    Encode/decode chart entry lists for one chart field.

    Args:
        table: Timeframe label table used for headers and reverse lookup
    """

    def __init__(self, table: Optional[TimeframeTable] = None):
        self.table = table or DEFAULT_TABLE

    def default_entry(self) -> ChartEntry:
        return ChartEntry(timeframe=self.table.default)

    def default_entries(self) -> list[ChartEntry]:
        """Starting list for a new record"""
        return [self.default_entry()]

    def header(self, entry: ChartEntry, prefix: Optional[str] = None) -> str:
        label = self.table.label(entry.timeframe)
        if prefix:
            return f"[{prefix} - {label}]"
        return f"[{label}]"

    def encode(self, entries: Iterable[ChartEntry], prefix: Optional[str] = None) -> ChartNotes:
        """
        Serialize entries for storage.

        Entries with neither images nor notes are dropped. Every kept entry
        writes its header even when its notes are empty.
        """
        kept = [entry for entry in entries if entry.has_content]

        blocks = [f"{self.header(entry, prefix)}\n{entry.notes.strip()}" for entry in kept]
        images = [image for entry in kept for image in entry.images]

        return ChartNotes(notes=BLOCK_SEPARATOR.join(blocks), images=images)

    def entry_from_segment(self, segment: Segment, label: Optional[str] = None) -> ChartEntry:
        """Build an entry, resolving the header label to a timeframe token"""
        label = segment.label if label is None else label
        if segment.label is None:
            return ChartEntry(timeframe=None, notes=segment.notes)

        timeframe = self.table.token(label)
        if timeframe is None:
            logger.debug(f"Unknown timeframe label {label!r}, using {self.table.default}")
            timeframe = self.table.default
        return ChartEntry(timeframe=timeframe, notes=segment.notes)

    def attach_images(self, entries: list[ChartEntry], images: Iterable[str]) -> list[ChartEntry]:
        """
        Give entry i the i-th image.

        Images beyond the last entry get their own default-timeframe entry
        with empty notes, so nothing stored is hidden from the editor.
        """
        images = list(images)
        if images and len(images) != len(entries):
            logger.debug(f"{len(entries)} chart sections for {len(images)} images")

        for index, image in enumerate(images):
            if index < len(entries):
                entries[index].images = [image]
            else:
                entries.append(ChartEntry(timeframe=self.table.default, images=[image]))
        return entries

    def decode(self, notes: Optional[str], images: Optional[Iterable[str]] = None) -> list[ChartEntry]:
        """Rebuild the entry list from stored notes and images"""
        notes = notes or ""
        images = list(images or [])

        if not notes and not images:
            return self.default_entries()

        entries = [self.entry_from_segment(segment) for segment in parse_segments(notes)]
        entries = self.attach_images(entries, images)

        return entries or self.default_entries()

    def decode_notes(self, stored: ChartNotes) -> list[ChartEntry]:
        return self.decode(stored.notes, stored.images)
