"""
Built-in note types and field formatting helpers.

The built-ins mirror Anki's stock note types and keep the ids other deck
generators use, so importing decks built by different tools merges cleanly.
"""

import html
import logging
from typing import Callable, Dict

from ..models import Field, NoteTypeKind, Template
from .note_type import NoteType


logger = logging.getLogger(__name__)

CARD_CSS = """.card {
 font-family: arial;
 font-size: 20px;
 text-align: center;
 color: black;
 background-color: white;
}
"""

CLOZE_CSS = CARD_CSS + """
.cloze {
 font-weight: bold;
 color: blue;
}
.nightMode .cloze {
 color: lightblue;
}
"""

ANSWER_SEPARATOR = "{{FrontSide}}\n\n<hr id=answer>\n\n"


def basic_model() -> NoteType:
    """Front/Back, one card."""
    return NoteType(
        1559383000,
        "Basic (apkg-builder)",
        fields=[Field("Front", font="Arial"), Field("Back", font="Arial")],
        templates=[
            Template("Card 1", qfmt="{{Front}}", afmt=ANSWER_SEPARATOR + "{{Back}}"),
        ],
        css=CARD_CSS,
    )


def basic_and_reversed_card_model() -> NoteType:
    """Front/Back plus the reversed Back/Front card."""
    return NoteType(
        1485830179,
        "Basic (and reversed card) (apkg-builder)",
        fields=[Field("Front", font="Arial"), Field("Back", font="Arial")],
        templates=[
            Template("Card 1", qfmt="{{Front}}", afmt=ANSWER_SEPARATOR + "{{Back}}"),
            Template("Card 2", qfmt="{{Back}}", afmt=ANSWER_SEPARATOR + "{{Front}}"),
        ],
        css=CARD_CSS,
    )


def basic_optional_reversed_card_model() -> NoteType:
    """Front/Back; the reversed card only exists when "Add Reverse" is filled in."""
    return NoteType(
        1382232460,
        "Basic (optional reversed card) (apkg-builder)",
        fields=[
            Field("Front", font="Arial"),
            Field("Back", font="Arial"),
            Field("Add Reverse", font="Arial"),
        ],
        templates=[
            Template("Card 1", qfmt="{{Front}}", afmt=ANSWER_SEPARATOR + "{{Back}}"),
            Template("Card 2", qfmt="{{#Add Reverse}}{{Back}}{{/Add Reverse}}",
                     afmt=ANSWER_SEPARATOR + "{{Front}}"),
        ],
        css=CARD_CSS,
    )


def basic_type_in_the_answer_model() -> NoteType:
    return NoteType(
        1305534440,
        "Basic (type in the answer) (apkg-builder)",
        fields=[Field("Front", font="Arial"), Field("Back", font="Arial")],
        templates=[
            Template("Card 1", qfmt="{{Front}}\n\n{{type:Back}}",
                     afmt="{{Front}}\n\n<hr id=answer>\n\n{{type:Back}}"),
        ],
        css=CARD_CSS,
    )


def cloze_model() -> NoteType:
    """One "Text" field; one card per cloze deletion group."""
    return NoteType(
        1122529321,
        "Cloze (apkg-builder)",
        fields=[Field("Text", font="Arial")],
        templates=[Template("Cloze", qfmt="{{cloze:Text}}", afmt="{{cloze:Text}}")],
        css=CLOZE_CSS,
        kind=NoteTypeKind.CLOZE,
    )


BUILTIN_NOTE_TYPES: Dict[str, Callable[[], NoteType]] = {
    'basic': basic_model,
    'basic_and_reversed': basic_and_reversed_card_model,
    'basic_optional_reversed': basic_optional_reversed_card_model,
    'basic_type_in_the_answer': basic_type_in_the_answer_model,
    'cloze': cloze_model,
}


class CardFormatter:
    """
    Formats media references for note fields.

    Only the bare filename goes into a field; Anki resolves it against the
    media shipped with the package.
    """

    @staticmethod
    def sound(filename: str) -> str:
        return f"[sound:{filename}]"

    @staticmethod
    def image(filename: str, alt: str = "") -> str:
        alt_attr = f' alt="{html.escape(alt)}"' if alt else ""
        return f'<img src="{html.escape(filename)}"{alt_attr}>'

    @staticmethod
    def cloze(text: str, group: int, hint: str = "") -> str:
        """Wrap text in a cloze deletion for the given 1-based group."""
        if group < 1:
            logger.warning(f"Cloze group {group} is below 1 and will not produce a card")
        suffix = f"::{hint}" if hint else ""
        return f"{{{{c{group}::{text}{suffix}}}}}"
