"""
Reading packages back.

Opens an ``.apkg`` archive, loads the embedded collection and returns its
decks, note types, notes, cards and media. Used to check generated packages
and by the ``inspect`` command.
"""

import json
import logging
import os
import sqlite3
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Union

from ..config import Config
from ..errors import PackageIOError, error_handler
from ..models import MediaEntry


logger = logging.getLogger(__name__)


@dataclass
class PackageContents:
    """Decoded contents of an ``.apkg`` archive."""
    decks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    note_types: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    notes: List[Dict[str, Any]] = field(default_factory=list)
    cards: List[Dict[str, Any]] = field(default_factory=list)
    media_manifest: Dict[str, str] = field(default_factory=dict)
    media: List[MediaEntry] = field(default_factory=list)

    def note_fields(self, note: Dict[str, Any]) -> List[str]:
        return note['flds'].split(Config.FIELD_SEPARATOR)

    def cards_of(self, note_id: int) -> List[Dict[str, Any]]:
        return [card for card in self.cards if card['nid'] == note_id]


def _rows(conn: sqlite3.Connection, table: str) -> List[Dict[str, Any]]:
    cursor = conn.execute(f"SELECT * FROM {table} ORDER BY id")
    columns = [description[0] for description in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


def read_package(source: Union[str, "os.PathLike[str]", BinaryIO]) -> PackageContents:
    """
    Load an ``.apkg`` archive.

    Raises:
        PackageIOError: if the archive or its collection cannot be read
    """
    contents = PackageContents()
    try:
        with zipfile.ZipFile(source) as archive:
            contents.media_manifest = json.loads(archive.read(Config.MEDIA_ENTRY).decode("utf-8"))
            for key, filename in sorted(contents.media_manifest.items(), key=lambda item: int(item[0])):
                contents.media.append(MediaEntry(int(key), filename, archive.read(key)))

            with tempfile.TemporaryDirectory(prefix="apkg_reader_") as tmp_dir:
                db_path = Path(tmp_dir) / Config.COLLECTION_ENTRY
                db_path.write_bytes(archive.read(Config.COLLECTION_ENTRY))
                conn = sqlite3.connect(str(db_path))
                try:
                    models_json, decks_json = conn.execute("SELECT models, decks FROM col").fetchone()
                    contents.note_types = json.loads(models_json)
                    contents.decks = json.loads(decks_json)
                    contents.notes = _rows(conn, "notes")
                    contents.cards = _rows(conn, "cards")
                finally:
                    conn.close()
    except (OSError, KeyError, ValueError, zipfile.BadZipFile, sqlite3.Error) as e:
        raise PackageIOError(error_handler.handle_io_error(e, {'package': str(source)})) from e

    logger.debug(f"Read package {source}: {len(contents.notes)} notes, {len(contents.cards)} cards")
    return contents


class PackageValidator:
    """
    Validates Anki packages for correctness and completeness.
    """

    @staticmethod
    def validate_package(package_path: str) -> bool:
        """
        Validate that an Anki package is properly formatted.

        Args:
            package_path: Path to the .apkg file

        Returns:
            True if package is valid, False otherwise
        """
        if not os.path.exists(package_path):
            logger.error(f"Package file not found: {package_path}")
            return False

        if not package_path.lower().endswith(Config.PACKAGE_EXTENSION):
            logger.error(f"Invalid file extension: {package_path}")
            return False

        try:
            contents = read_package(package_path)
        except PackageIOError as e:
            logger.error(f"Package validation failed: {e.processing_error.details}")
            return False

        note_ids = {note['id'] for note in contents.notes}
        orphans = [card['id'] for card in contents.cards if card['nid'] not in note_ids]
        if orphans:
            logger.error(f"Package has {len(orphans)} card(s) without a note")
            return False

        unknown_types = {note['mid'] for note in contents.notes} - {int(k) for k in contents.note_types}
        if unknown_types:
            logger.error(f"Notes reference unknown note types: {sorted(unknown_types)}")
            return False

        logger.info(f"Package validation passed: {package_path}")
        return True

    @staticmethod
    def get_package_info(package_path: str) -> dict:
        """
        Get information about an Anki package.

        Args:
            package_path: Path to the .apkg file

        Returns:
            Dictionary with package information
        """
        info = {
            'path': package_path,
            'exists': False,
            'size_bytes': 0,
            'valid': False,
            'decks': [],
            'note_types': [],
            'notes': 0,
            'cards': 0,
            'media': {},
        }

        if not os.path.exists(package_path):
            return info

        info['exists'] = True
        info['size_bytes'] = os.path.getsize(package_path)
        info['valid'] = PackageValidator.validate_package(package_path)
        if info['valid']:
            contents = read_package(package_path)
            info['decks'] = sorted(deck['name'] for deck in contents.decks.values())
            info['note_types'] = sorted(model['name'] for model in contents.note_types.values())
            info['notes'] = len(contents.notes)
            info['cards'] = len(contents.cards)
            info['media'] = contents.media_manifest

        return info
