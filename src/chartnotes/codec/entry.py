"""Chart entry data model"""

from dataclasses import dataclass, field
from typing import Optional
import uuid


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ChartEntry:
    """One timeframe-labelled chart annotation being edited"""
    timeframe: Optional[str] = None  # None = no header found, default applied at render
    images: list[str] = field(default_factory=list)
    notes: str = ""
    id: str = field(default_factory=_new_id, compare=False)

    @property
    def has_content(self) -> bool:
        return bool(self.images) or bool(self.notes.strip())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timeframe": self.timeframe,
            "images": list(self.images),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChartEntry":
        entry = cls(
            timeframe=data.get("timeframe"),
            images=list(data.get("images") or []),
            notes=data.get("notes") or "",
        )
        if data.get("id"):
            entry.id = data["id"]
        return entry


@dataclass
class ChartNotes:
    """Persisted form of a chart entry list: one text blob plus a flat image list"""
    notes: str = ""
    images: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.notes and not self.images

    def to_dict(self) -> dict:
        return {"notes": self.notes, "images": list(self.images)}
