"""
Core data models for the Anki package builder.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .config import Config


class NoteTypeKind(Enum):
    """Note type variants; values match Anki's model ``type`` column."""
    FRONT_BACK = 0
    CLOZE = 1


@dataclass(frozen=True)
class Field:
    """A note-type field definition."""
    name: str
    font: str = Config.DEFAULT_FONT
    size: int = Config.DEFAULT_FONT_SIZE
    sticky: bool = False
    rtl: bool = False

    def to_json(self, ordinal: int) -> Dict[str, Any]:
        return {
            'name': self.name,
            'font': self.font,
            'size': self.size,
            'sticky': self.sticky,
            'rtl': self.rtl,
            'media': [],
            'ord': ordinal,
        }


@dataclass(frozen=True)
class Template:
    """A card template: question/answer patterns plus browser overrides."""
    name: str
    qfmt: str = ""
    afmt: str = ""
    bqfmt: str = ""
    bafmt: str = ""
    did: Optional[int] = None

    def to_json(self, ordinal: int) -> Dict[str, Any]:
        return {
            'name': self.name,
            'qfmt': self.qfmt,
            'afmt': self.afmt,
            'bqfmt': self.bqfmt,
            'bafmt': self.bafmt,
            'did': self.did,
            'ord': ordinal,
        }


@dataclass(frozen=True)
class RequirementRecord:
    """Inferred rule gating the card of one front/back template."""
    template_ordinal: int
    rule: str  # "all" or "any"
    field_ordinals: Tuple[int, ...]

    def is_satisfied_by(self, field_values: List[str]) -> bool:
        """Check the rule against a note's field values."""
        present = (len(field_values[ordinal]) > 0 for ordinal in self.field_ordinals)
        if self.rule == "all":
            return all(present)
        if self.rule == "any":
            return any(present)
        raise ValueError(f"Unknown requirement rule: {self.rule}")

    def to_json(self) -> List[Any]:
        return [self.template_ordinal, self.rule, list(self.field_ordinals)]


@dataclass(frozen=True)
class Card:
    """One study card generated by a note."""
    ordinal: int
    suspended: bool = False


@dataclass
class MediaEntry:
    """A medium as it appears in the archive manifest."""
    index: int
    filename: str
    data: bytes = field(repr=False, default=b"")
