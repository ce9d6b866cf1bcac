"""
Notes: field values bound to a note type, plus the cards they generate.
"""

import hashlib
import logging
import re
import string
from typing import Iterable, List, Optional

from ..config import Config
from ..errors import InvalidTagError, SchemaMismatchError, error_handler
from ..models import Card
from .card_generation import generate_cards
from .note_type import NoteType


logger = logging.getLogger(__name__)

# Anki's base91 alphabet for note guids.
_BASE91_TABLE = string.ascii_letters + string.digits + "!#$%&()*+,-./:;<=>?@[]^_`{|}~"

# Anything that looks like a tag but is not a plain tag, a comment or CDATA.
_INVALID_HTML_TAG_RE = re.compile(r"<(?!/?[a-zA-Z0-9]+(?: .*|/?)>|!--|!\[CDATA\[)(?:.|\n)*?>")


def guid_for(*values) -> str:
    """Deterministic note guid: first 8 bytes of a SHA-256 digest, base91 encoded."""
    hash_str = "__".join(str(value) for value in values)
    digest = hashlib.sha256(hash_str.encode("utf-8")).digest()
    hash_int = int.from_bytes(digest[:8], "big")

    chars = []
    while hash_int > 0:
        hash_int, remainder = divmod(hash_int, len(_BASE91_TABLE))
        chars.append(_BASE91_TABLE[remainder])
    return "".join(reversed(chars))


def find_invalid_html_tags(text: str) -> List[str]:
    return _INVALID_HTML_TAG_RE.findall(text)


class Note:
    """
    A single fact: a note type plus one value per note-type field.

    Cards are derived from the current field values. Field values are HTML;
    malformed tags are reported as warnings, never as errors.
    """

    def __init__(self, note_type: NoteType, fields: Iterable[str],
                 sort_field: Optional[str] = None,
                 tags: Iterable[str] = (),
                 guid: Optional[str] = None,
                 suspended: Iterable[int] = ()):
        self.note_type = note_type
        self.fields = list(fields)
        self.tags = list(tags)
        self.suspended = frozenset(suspended)
        self._sort_field = sort_field
        self._guid = guid

        self.validate()
        self._warn_on_invalid_html()

    @property
    def guid(self) -> str:
        if self._guid is not None:
            return self._guid
        return guid_for(*self.fields)

    @property
    def sort_field(self) -> str:
        """Explicit sort field, else the value at the note type's sort field index."""
        if self._sort_field is not None:
            return self._sort_field
        index = self.note_type.sort_field_index
        if 0 <= index < len(self.fields):
            return self.fields[index]
        return ""

    @property
    def cards(self) -> List[Card]:
        self.check_field_count()
        return generate_cards(self.note_type, self.fields, self.suspended)

    def check_field_count(self) -> None:
        expected = len(self.note_type.fields)
        if len(self.fields) != expected:
            raise SchemaMismatchError(
                error_handler.field_count_mismatch(self.note_type.name, expected, len(self.fields))
            )

    def check_tags(self) -> None:
        for tag in self.tags:
            if any(ch.isspace() for ch in tag):
                raise InvalidTagError(error_handler.invalid_tag(tag))

    def validate(self) -> None:
        """Fail fast on a field-count mismatch or a tag containing whitespace."""
        self.check_field_count()
        self.check_tags()

    def _warn_on_invalid_html(self) -> None:
        for name, value in zip(self.note_type.field_names, self.fields):
            invalid_tags = find_invalid_html_tags(value)
            if invalid_tags:
                logger.warning(
                    f"Field '{name}' contained the following invalid HTML tags. Make sure you are "
                    f"calling html.escape() if your field data isn't already HTML-encoded: "
                    f"{' '.join(invalid_tags)}"
                )

    def format_fields(self) -> str:
        return Config.FIELD_SEPARATOR.join(self.fields)

    def format_tags(self) -> str:
        return f" {' '.join(self.tags)} "

    def __repr__(self) -> str:
        return f"Note(note_type={self.note_type.name!r}, fields={self.fields!r}, tags={self.tags!r})"
