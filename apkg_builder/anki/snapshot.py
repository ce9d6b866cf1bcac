"""
Relational snapshot building.

Flattens decks, note types, notes and cards into the rows of an Anki
collection. Building is pure: inputs are validated and read, never changed,
so the same package can be snapshotted any number of times.
"""

import json
import logging
from dataclasses import astuple, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models import Card
from . import schema
from .deck import Deck
from .id_generator import IdGenerator
from .note import Note
from .note_type import NoteType


logger = logging.getLogger(__name__)


@dataclass
class NoteRow:
    """One row of the ``notes`` table, columns in schema order."""
    id: int
    guid: str
    mid: int
    mod: int
    usn: int
    tags: str
    flds: str
    sfld: str
    csum: int = 0
    flags: int = 0
    data: str = ""

    def as_tuple(self) -> Tuple[Any, ...]:
        return astuple(self)


@dataclass
class CardRow:
    """One row of the ``cards`` table; scheduling columns stay at neutral defaults."""
    id: int
    nid: int
    did: int
    ord: int
    mod: int
    usn: int
    type: int = 0
    queue: int = 0
    due: int = 0
    ivl: int = 0
    factor: int = 0
    reps: int = 0
    lapses: int = 0
    left: int = 0
    odue: int = 0
    odid: int = 0
    flags: int = 0
    data: str = ""

    def as_tuple(self) -> Tuple[Any, ...]:
        return astuple(self)


@dataclass
class CollectionSnapshot:
    """Everything that goes into the embedded collection database."""
    timestamp: float
    decks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    note_types: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    notes: List[NoteRow] = field(default_factory=list)
    cards: List[CardRow] = field(default_factory=list)

    def col_row(self) -> Tuple[Any, ...]:
        """Values of the singleton ``col`` row (without its null id)."""
        return (
            schema.COLLECTION_CREATED,
            schema.COLLECTION_MODIFIED,
            schema.SCHEMA_MODIFIED,
            schema.SCHEMA_VERSION,
            0,  # dty
            0,  # usn
            0,  # ls
            json.dumps(schema.COLLECTION_CONF),
            json.dumps(self.note_types),
            json.dumps(self.decks),
            json.dumps({str(schema.DEFAULT_DECK_CONFIG['id']): schema.DEFAULT_DECK_CONFIG}),
            json.dumps({}),
        )


class SnapshotBuilder:
    """
    Builds a CollectionSnapshot from decks.

    Note and card primary keys are drawn from one IdGenerator shared by the
    whole traversal; deck and note-type ids are the author's own.
    """

    def __init__(self, timestamp: float, id_generator: Optional[IdGenerator] = None):
        self.timestamp = timestamp
        self.id_generator = id_generator or IdGenerator.from_timestamp(timestamp)

    def build(self, decks: Iterable[Deck]) -> CollectionSnapshot:
        decks = list(decks)
        self._validate(decks)

        snapshot = CollectionSnapshot(timestamp=self.timestamp)
        snapshot.decks[str(schema.DEFAULT_DECK_ID)] = dict(schema.DEFAULT_DECK)

        registered: Dict[int, NoteType] = {}
        for deck in decks:
            snapshot.decks[str(deck.id)] = deck.to_json()
            for note_type_id, note_type in deck.note_types.items():
                previous = registered.get(note_type_id)
                if previous is not None and previous is not note_type:
                    logger.warning(
                        f"Note type id {note_type_id} is used by both '{previous.name}' and "
                        f"'{note_type.name}'; keeping '{note_type.name}'"
                    )
                registered[note_type_id] = note_type
                snapshot.note_types[str(note_type_id)] = note_type.to_json(self.timestamp, deck.id)

            for note in deck.notes:
                self._add_note(snapshot, note, deck.id)

        logger.info(
            f"Built snapshot: {len(decks)} deck(s), {len(snapshot.note_types)} note type(s), "
            f"{len(snapshot.notes)} note(s), {len(snapshot.cards)} card(s)"
        )
        return snapshot

    def _validate(self, decks: List[Deck]) -> None:
        for deck in decks:
            for note in deck.notes:
                note.validate()

    def _add_note(self, snapshot: CollectionSnapshot, note: Note, deck_id: int) -> None:
        note_id = next(self.id_generator)
        snapshot.notes.append(NoteRow(
            id=note_id,
            guid=note.guid,
            mid=note.note_type.id,
            mod=int(self.timestamp),
            usn=-1,
            tags=note.format_tags(),
            flds=note.format_fields(),
            sfld=note.sort_field,
        ))
        for card in note.cards:
            snapshot.cards.append(self._card_row(card, note_id, deck_id))

    def _card_row(self, card: Card, note_id: int, deck_id: int) -> CardRow:
        return CardRow(
            id=next(self.id_generator),
            nid=note_id,
            did=deck_id,
            ord=card.ordinal,
            mod=int(self.timestamp),
            usn=-1,
            queue=-1 if card.suspended else 0,
        )
