"""
Pytest configuration and shared fixtures.

Provides note types, decks and a stand-in renderer for unit tests and
property-based tests using Hypothesis.
"""

import re
from typing import Dict

import pytest
from hypothesis import settings, Verbosity

from apkg_builder.models import Field, Template
from apkg_builder.anki.deck import Deck
from apkg_builder.anki.note import Note
from apkg_builder.anki.note_type import NoteType
from apkg_builder.anki.templates import basic_and_reversed_card_model, cloze_model
from apkg_builder.errors import error_handler


settings.register_profile("apkg_builder",
    max_examples=50,
    verbosity=Verbosity.normal,
    deadline=None
)
settings.load_profile("apkg_builder")


class SubstitutionRenderer:
    """Replaces ``{{Name}}`` with the field value; knows nothing about sections."""

    _TAG_RE = re.compile(r"{{([^#^/}][^}]*)}}")

    def render(self, pattern: str, fields: Dict[str, str]) -> str:
        return self._TAG_RE.sub(lambda m: fields.get(m.group(1).strip(), ""), pattern)


@pytest.fixture(autouse=True)
def reset_error_handler():
    """Keep the global error handler from leaking state between tests."""
    error_handler.clear_errors()
    yield
    error_handler.clear_errors()


@pytest.fixture
def capitals_model():
    """A two-field, one-template front/back note type."""
    return NoteType(
        1607392319,
        "Capitals",
        fields=[Field("Country"), Field("Capital")],
        templates=[
            Template("Card 1", qfmt="{{Country}}", afmt="{{FrontSide}}<hr id=answer>{{Capital}}"),
        ],
    )


@pytest.fixture
def reversed_model():
    return basic_and_reversed_card_model()


@pytest.fixture
def cloze():
    return cloze_model()


@pytest.fixture
def capitals_deck(capitals_model, cloze):
    """A deck mixing front/back and cloze notes."""
    deck = Deck(2059400110, "Country Capitals", "Capitals of the world")
    deck.add_note(Note(capitals_model, ["France", "Paris"], tags=["europe"]))
    deck.add_note(Note(capitals_model, ["Japan", "Tokyo"], tags=["asia"]))
    deck.add_note(Note(cloze, ["{{c1::Canberra}} is the capital of {{c2::Australia}}"]))
    return deck


@pytest.fixture
def stand_in_renderer():
    return SubstitutionRenderer()
