"""
Decks: named collections of notes.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Union

from .note import Note
from .note_type import NoteType


logger = logging.getLogger(__name__)


class Deck:
    """A deck with an author-chosen id, a name and a description."""

    def __init__(self, deck_id: int, name: str, description: str = "",
                 notes: Optional[List[Note]] = None):
        self.id = deck_id
        self.name = name
        self.description = description
        self.notes: List[Note] = list(notes or [])
        self._registered_note_types: Dict[int, NoteType] = {}

    def add_note(self, note: Note) -> None:
        self.notes.append(note)

    def add_note_type(self, note_type: NoteType) -> None:
        """Ship a note type with this deck even if no note uses it."""
        self._registered_note_types[note_type.id] = note_type
        logger.debug(f"Deck '{self.name}': registered note type '{note_type.name}'")

    @property
    def note_types(self) -> Dict[int, NoteType]:
        """Note types of this deck, recomputed from its notes on every access."""
        note_types = dict(self._registered_note_types)
        for note in self.notes:
            note_types[note.note_type.id] = note.note_type
        return note_types

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the mapping Anki stores in the collection's ``decks`` blob."""
        return {
            'collapsed': False,
            'conf': 1,
            'desc': self.description,
            'dyn': 0,
            'extendNew': 0,
            'extendRev': 50,
            'id': self.id,
            'lrnToday': [163, 2],
            'mod': 1425278051,
            'name': self.name,
            'newToday': [163, 2],
            'revToday': [163, 0],
            'timeToday': [163, 23598],
            'usn': -1,
        }

    def write_to_file(self, file: Union[str, "os.PathLike"], timestamp: Optional[float] = None) -> None:
        """Write this deck alone, without media, to an ``.apkg`` file."""
        from .package_generator import Package
        Package(self).write_to_file(file, timestamp=timestamp)

    def __repr__(self) -> str:
        return f"Deck(id={self.id!r}, name={self.name!r}, notes={len(self.notes)})"
