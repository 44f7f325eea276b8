"""Render slots for read-only chart views

A view shows one card per slot, where the number of slots is the larger of
the image count and the section count. A slot may carry notes without an
image or an image without notes.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from chartnotes.codec.codec import Segment, parse_segments
from chartnotes.codec.phased import ChartPhase, split_phase_label, split_images


@dataclass
class ChartSlot:
    """One card in a chart view"""
    index: int
    label: str
    notes: str = ""
    image: Optional[str] = None


def pair_slots(segments: list[Segment], images: Iterable[str]) -> list[ChartSlot]:
    """Pair sections and images by position, padding whichever side is shorter"""
    images = list(images)
    slots = []
    for index in range(max(len(images), len(segments))):
        segment = segments[index] if index < len(segments) else None
        label = segment.label if segment is not None and segment.label else f"Chart {index + 1}"
        slots.append(ChartSlot(
            index=index,
            label=label,
            notes=segment.notes if segment is not None else "",
            image=images[index] if index < len(images) else None,
        ))
    return slots


def chart_slots(notes: Optional[str], images: Optional[Iterable[str]] = None) -> list[ChartSlot]:
    return pair_slots(parse_segments(notes or ""), images or [])


def phased_slots(notes: Optional[str], images: Optional[Iterable[str]] = None) -> dict[ChartPhase, list[ChartSlot]]:
    """Slots for both groups of a trade's chart analysis, labels without the phase prefix"""
    images = list(images or [])
    groups: dict[ChartPhase, list[Segment]] = {ChartPhase.BEFORE: [], ChartPhase.AFTER: []}

    for segment in parse_segments(notes or ""):
        if segment.label is None:
            groups[ChartPhase.BEFORE].append(segment)
            continue
        phase, label = split_phase_label(segment.label)
        groups[phase or ChartPhase.BEFORE].append(Segment(label=label, notes=segment.notes))

    before_images, after_images = split_images(
        images, len(groups[ChartPhase.BEFORE]), len(groups[ChartPhase.AFTER])
    )
    return {
        ChartPhase.BEFORE: pair_slots(groups[ChartPhase.BEFORE], before_images),
        ChartPhase.AFTER: pair_slots(groups[ChartPhase.AFTER], after_images),
    }
