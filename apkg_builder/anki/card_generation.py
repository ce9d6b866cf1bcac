"""
Card generation.

Decides which cards a note instantiates. Front/back note types evaluate the
inferred requirement records; cloze note types read deletion groups out of
the note's own field content.
"""

import logging
import re
from typing import TYPE_CHECKING, AbstractSet, Callable, Dict, List, Sequence, Set

from ..models import Card, NoteTypeKind

if TYPE_CHECKING:
    from .note_type import NoteType


logger = logging.getLogger(__name__)

# Field references inside a cloze question pattern, with or without filters.
_CLOZE_FIELD_RE = re.compile(r"{{[^}]*?cloze:(?:[^}]?:)*(.+?)}}")
_LEGACY_CLOZE_FIELD_RE = re.compile(r"<%cloze:(.+?)%>")
# Deletion markers inside field content, e.g. {{c2::Paris}}.
_CLOZE_DELETION_RE = re.compile(r"{{c(\d+)::.+?}}", re.DOTALL)


def front_back_cards(note_type: "NoteType", field_values: Sequence[str],
                     suspended: AbstractSet[int] = frozenset()) -> List[Card]:
    """One card per template whose requirement record the field values satisfy."""
    cards = []
    for record in note_type.requirements:
        if record.is_satisfied_by(list(field_values)):
            ordinal = record.template_ordinal
            cards.append(Card(ordinal, ordinal in suspended))
    return cards


def cloze_field_names(qfmt: str) -> Set[str]:
    """Names of the fields a cloze question pattern deletes from."""
    return set(_CLOZE_FIELD_RE.findall(qfmt)) | set(_LEGACY_CLOZE_FIELD_RE.findall(qfmt))


def cloze_ordinals(text: str) -> Set[int]:
    """Zero-based deletion groups referenced in a field value."""
    ordinals = {int(group) - 1 for group in _CLOZE_DELETION_RE.findall(text)}
    return {ordinal for ordinal in ordinals if ordinal >= 0}


def cloze_cards(note_type: "NoteType", field_values: Sequence[str],
                suspended: AbstractSet[int] = frozenset()) -> List[Card]:
    """One card per distinct deletion group; group 0 when the note has none."""
    ordinals: Set[int] = set()
    if note_type.templates:
        for name in cloze_field_names(note_type.templates[0].qfmt):
            index = note_type.field_index(name)
            value = field_values[index] if index >= 0 else ""
            ordinals |= cloze_ordinals(value)
    if not ordinals:
        ordinals = {0}
    return [Card(ordinal, ordinal in suspended) for ordinal in ordinals]


_GENERATORS: Dict[NoteTypeKind, Callable[..., List[Card]]] = {
    NoteTypeKind.FRONT_BACK: front_back_cards,
    NoteTypeKind.CLOZE: cloze_cards,
}


def generate_cards(note_type: "NoteType", field_values: Sequence[str],
                   suspended: AbstractSet[int] = frozenset()) -> List[Card]:
    """Generate the cards of a note according to its note type's kind."""
    generator = _GENERATORS[note_type.kind]
    cards = generator(note_type, field_values, suspended)
    logger.debug(f"{note_type.name}: generated card ordinals {[card.ordinal for card in cards]}")
    return cards
