"""
apkg-builder: build Anki flashcard packages from note types, notes and media.
"""

__version__ = "0.1.0"

from .models import Card, Field, NoteTypeKind, RequirementRecord, Template
from .errors import (
    ApkgBuilderError,
    DeckFileError,
    InvalidTagError,
    MediaPathError,
    PackageIOError,
    SchemaMismatchError,
    TemplateRenderError,
    UninferableTemplateError,
)
from .anki import (
    Deck,
    MediaFile,
    Note,
    NoteType,
    Package,
    read_package,
    basic_model,
    basic_and_reversed_card_model,
    basic_optional_reversed_card_model,
    basic_type_in_the_answer_model,
    cloze_model,
    CardFormatter,
)

__all__ = [
    'Card',
    'Field',
    'NoteTypeKind',
    'RequirementRecord',
    'Template',
    'ApkgBuilderError',
    'DeckFileError',
    'InvalidTagError',
    'MediaPathError',
    'PackageIOError',
    'SchemaMismatchError',
    'TemplateRenderError',
    'UninferableTemplateError',
    'Deck',
    'MediaFile',
    'Note',
    'NoteType',
    'Package',
    'read_package',
    'basic_model',
    'basic_and_reversed_card_model',
    'basic_optional_reversed_card_model',
    'basic_type_in_the_answer_model',
    'cloze_model',
    'CardFormatter',
]
