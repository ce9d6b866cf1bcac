"""
Anki note-type, note, deck and package building.

This package infers which cards each note generates and writes decks plus
media into a single ``.apkg`` archive Anki can import.
"""

from .rendering import MustacheRenderer, TemplateRenderer
from .requirements import infer_requirement, infer_requirements
from .card_generation import generate_cards
from .note_type import NoteType
from .note import Note, guid_for
from .deck import Deck
from .id_generator import IdGenerator
from .snapshot import CollectionSnapshot, SnapshotBuilder
from .package_generator import ContainerPacker, MediaFile, Package
from .reader import PackageContents, PackageValidator, read_package
from .templates import (
    BUILTIN_NOTE_TYPES,
    CardFormatter,
    basic_model,
    basic_and_reversed_card_model,
    basic_optional_reversed_card_model,
    basic_type_in_the_answer_model,
    cloze_model,
)
from .naming import UniqueNamingManager, stable_id, sanitize_package_filename

__all__ = [
    'MustacheRenderer',
    'TemplateRenderer',
    'infer_requirement',
    'infer_requirements',
    'generate_cards',
    'NoteType',
    'Note',
    'guid_for',
    'Deck',
    'IdGenerator',
    'CollectionSnapshot',
    'SnapshotBuilder',
    'ContainerPacker',
    'MediaFile',
    'Package',
    'PackageContents',
    'PackageValidator',
    'read_package',
    'BUILTIN_NOTE_TYPES',
    'CardFormatter',
    'basic_model',
    'basic_and_reversed_card_model',
    'basic_optional_reversed_card_model',
    'basic_type_in_the_answer_model',
    'cloze_model',
    'UniqueNamingManager',
    'stable_id',
    'sanitize_package_filename',
]
