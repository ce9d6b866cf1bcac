"""
Deck description files.

A YAML document declaring note types, decks with their notes, and media:

    note_types:
      - name: Capitals
        fields: [Country, Capital]
        templates:
          - name: Card 1
            qfmt: "{{Country}}"
            afmt: "{{FrontSide}}<hr id=answer>{{Capital}}"
    decks:
      - name: Country Capitals
        description: Capitals of the world
        notes:
          - note_type: Capitals
            fields: [France, Paris]
            tags: [europe]
    media:
      - audio/paris.mp3

Ids may be omitted; they are then derived from names. A note may reference a
built-in note type by key (``basic``, ``cloze``, ...) without declaring it.
Relative media paths resolve against the deck file's directory.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import DeckFileError, error_handler
from .models import NoteTypeKind
from .anki.deck import Deck
from .anki.naming import UniqueNamingManager
from .anki.note import Note
from .anki.note_type import NoteType
from .anki.package_generator import MediaFile, Package
from .anki.templates import BUILTIN_NOTE_TYPES


logger = logging.getLogger(__name__)

_KINDS = {
    'front_back': NoteTypeKind.FRONT_BACK,
    'cloze': NoteTypeKind.CLOZE,
}


class DeckFileLoader:
    """Turns a parsed deck description into a Package."""

    def __init__(self, source: str = "<deck file>", base_dir: Optional[Path] = None):
        self.source = source
        self.base_dir = base_dir or Path.cwd()
        self.naming = UniqueNamingManager()
        self.note_types: Dict[str, NoteType] = {}

    def _fail(self, problem: str) -> DeckFileError:
        return DeckFileError(error_handler.invalid_deck_file(self.source, problem))

    def _require(self, entry: Dict[str, Any], key: str, where: str) -> Any:
        if not isinstance(entry, dict):
            raise self._fail(f"{where} must be a mapping")
        if key not in entry:
            raise self._fail(f"{where} is missing '{key}'")
        return entry[key]

    def load(self, data: Any) -> Package:
        if not isinstance(data, dict):
            raise self._fail("top level must be a mapping")

        declared_ids = [entry['id'] for section in ('note_types', 'decks')
                        for entry in data.get(section) or [] if isinstance(entry, dict) and 'id' in entry]
        self.naming.register_existing_ids(declared_ids)

        for index, entry in enumerate(data.get('note_types') or []):
            note_type = self._note_type(entry, f"note_types[{index}]")
            self.note_types[entry['name']] = note_type

        decks = [self._deck(entry, f"decks[{index}]") for index, entry in enumerate(data.get('decks') or [])]
        if not decks:
            raise self._fail("no decks declared")

        media = [self._media(path, f"media[{index}]") for index, path in enumerate(data.get('media') or [])]
        logger.info(f"Loaded {len(decks)} deck(s) and {len(media)} media file(s) from {self.source}")
        return Package(decks, media)

    def _note_type(self, entry: Dict[str, Any], where: str) -> NoteType:
        name = self._require(entry, 'name', where)

        builtin = entry.get('builtin')
        if builtin is not None:
            if builtin not in BUILTIN_NOTE_TYPES:
                raise self._fail(f"{where}: unknown built-in note type '{builtin}'")
            return BUILTIN_NOTE_TYPES[builtin]()

        kind_name = entry.get('kind', 'front_back')
        if kind_name not in _KINDS:
            raise self._fail(f"{where}: kind must be one of {sorted(_KINDS)}")

        fields = self._require(entry, 'fields', where)
        templates = self._require(entry, 'templates', where)
        if not isinstance(fields, list) or not isinstance(templates, list):
            raise self._fail(f"{where}: 'fields' and 'templates' must be lists")

        options = {key: entry[key] for key in ('css', 'latex_pre', 'latex_post', 'sort_field_index')
                   if key in entry}
        try:
            return NoteType(
                entry['id'] if 'id' in entry else self.naming.id_for(f"note_type:{name}"),
                name,
                fields=fields,
                templates=templates,
                kind=_KINDS[kind_name],
                **options,
            )
        except TypeError as e:
            raise self._fail(f"{where}: {e}") from e

    def _resolve_note_type(self, key: str, where: str) -> NoteType:
        if key in self.note_types:
            return self.note_types[key]
        if key in BUILTIN_NOTE_TYPES:
            self.note_types[key] = BUILTIN_NOTE_TYPES[key]()
            return self.note_types[key]
        raise self._fail(f"{where}: unknown note type '{key}'")

    def _deck(self, entry: Dict[str, Any], where: str) -> Deck:
        name = self._require(entry, 'name', where)
        deck_id = entry['id'] if 'id' in entry else self.naming.id_for(f"deck:{name}")
        deck = Deck(deck_id, name, entry.get('description', ''))

        for index, note_entry in enumerate(entry.get('notes') or []):
            deck.add_note(self._note(note_entry, f"{where}.notes[{index}]"))
        return deck

    def _note(self, entry: Dict[str, Any], where: str) -> Note:
        note_type = self._resolve_note_type(self._require(entry, 'note_type', where), where)
        fields = self._require(entry, 'fields', where)
        if not isinstance(fields, list):
            raise self._fail(f"{where}: 'fields' must be a list")
        tags = self._optional_list(entry, 'tags', where)
        suspended = self._optional_list(entry, 'suspended', where)
        if not all(isinstance(ordinal, int) and not isinstance(ordinal, bool) for ordinal in suspended):
            raise self._fail(f"{where}: 'suspended' must list card ordinals")
        return Note(
            note_type,
            ["" if value is None else str(value) for value in fields],
            sort_field=entry.get('sort_field'),
            tags=[str(tag) for tag in tags],
            guid=entry.get('guid'),
            suspended=suspended,
        )

    def _optional_list(self, entry: Dict[str, Any], key: str, where: str) -> List[Any]:
        value = entry.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self._fail(f"{where}: '{key}' must be a list")
        return value

    def _media(self, path: Union[str, Path], where: str) -> MediaFile:
        if not isinstance(path, str):
            raise self._fail(f"{where}: media entries must be paths")
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = self.base_dir / resolved
        return MediaFile.from_path(resolved)


def parse_deck_description(data: Any, source: str = "<deck file>",
                           base_dir: Optional[Path] = None) -> Package:
    """Build a Package from an already-parsed deck description."""
    return DeckFileLoader(source, base_dir).load(data)


def load_deck_file(path: Union[str, Path]) -> Package:
    """
    Read a YAML deck description from disk.

    Raises:
        DeckFileError: if the file cannot be read or does not describe decks
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise DeckFileError(error_handler.invalid_deck_file(str(path), f"cannot be read: {e}")) from e
    except yaml.YAMLError as e:
        raise DeckFileError(error_handler.invalid_deck_file(str(path), f"invalid YAML: {e}")) from e
    return parse_deck_description(data, str(path), path.parent)
