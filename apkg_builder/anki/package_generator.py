"""
Anki package (.apkg) generation.

A package is a zip archive holding the collection database
(``collection.anki2``), a JSON media manifest (``media``) and one entry per
medium named by its numeric index.
"""

import json
import logging
import os
import sqlite3
import tempfile
import time
import zipfile
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional, Sequence, Union

from ..config import Config
from ..errors import MediaPathError, PackageIOError, error_handler
from . import schema
from .deck import Deck
from .id_generator import IdGenerator
from .snapshot import CollectionSnapshot, SnapshotBuilder


logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
Sink = Union[PathLike, BinaryIO]


class MediaFile:
    """
    A medium to embed in the package.

    Either a path on the filesystem (logical name = base name) or bytes
    held in memory with an explicit logical name. Both end up laid out
    identically in the archive.
    """

    def __init__(self, filename: str, path: Optional[Path] = None, data: Optional[bytes] = None):
        self.filename = filename
        self.path = path
        self.data = data

    @classmethod
    def from_path(cls, path: PathLike) -> "MediaFile":
        raw = os.fspath(path)
        if not raw or raw.endswith(("/", os.sep)):
            raise MediaPathError(error_handler.invalid_media_path(path, "path has no filename"))
        resolved = Path(raw)
        if resolved.name in ("", ".", ".."):
            raise MediaPathError(error_handler.invalid_media_path(path, "path has no filename"))
        return cls(resolved.name, path=resolved)

    @classmethod
    def from_bytes(cls, data: bytes, filename: str) -> "MediaFile":
        if not filename or Path(filename).name != filename:
            raise MediaPathError(
                error_handler.invalid_media_path(filename, "in-memory media needs a bare filename")
            )
        return cls(filename, data=bytes(data))

    @classmethod
    def coerce(cls, value: Union["MediaFile", PathLike]) -> "MediaFile":
        if isinstance(value, MediaFile):
            return value
        return cls.from_path(value)

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise PackageIOError(error_handler.handle_io_error(e, {'media': str(self.path)})) from e

    def __repr__(self) -> str:
        source = str(self.path) if self.path is not None else f"<{len(self.data)} bytes>"
        return f"MediaFile(filename={self.filename!r}, source={source})"


def build_media_manifest(media_files: Sequence[MediaFile]) -> Dict[str, str]:
    """Map each archive-local numeric key to the medium's logical filename."""
    manifest = {str(index): media.filename for index, media in enumerate(media_files)}
    seen = set()
    for name in manifest.values():
        if name in seen:
            logger.warning(f"Media filename '{name}' appears more than once; Anki keeps only one")
        seen.add(name)
    return manifest


class ContainerPacker:
    """Serializes a snapshot and media into one archive."""

    def pack(self, snapshot: CollectionSnapshot, media_files: Sequence[MediaFile], sink: Sink) -> None:
        try:
            with tempfile.TemporaryDirectory(prefix="apkg_builder_") as tmp_dir:
                db_path = Path(tmp_dir) / Config.COLLECTION_ENTRY
                self.write_collection(snapshot, db_path)

                with zipfile.ZipFile(sink, "w") as archive:
                    archive.write(db_path, Config.COLLECTION_ENTRY)
                    manifest = build_media_manifest(media_files)
                    archive.writestr(Config.MEDIA_ENTRY, json.dumps(manifest))
                    for index, media in enumerate(media_files):
                        archive.writestr(str(index), media.read_bytes())
                        logger.debug(f"Packed media {index}: {media.filename}")
        except (OSError, zipfile.LargeZipFile) as e:
            raise PackageIOError(error_handler.handle_io_error(e, {'sink': str(sink)})) from e

        logger.info(f"Packed {len(snapshot.notes)} notes, {len(snapshot.cards)} cards and "
                    f"{len(media_files)} media file(s)")

    def write_collection(self, snapshot: CollectionSnapshot, db_path: Path) -> None:
        """Materialize the snapshot as an Anki schema-11 SQLite database."""
        try:
            conn = sqlite3.connect(str(db_path))
            try:
                conn.executescript(schema.APKG_SCHEMA)
                conn.execute(schema.INSERT_COL, snapshot.col_row())
                conn.executemany(schema.INSERT_NOTE, [row.as_tuple() for row in snapshot.notes])
                conn.executemany(schema.INSERT_CARD, [row.as_tuple() for row in snapshot.cards])
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PackageIOError(error_handler.handle_io_error(e, {'database': str(db_path)})) from e


class Package:
    """
    Decks plus media, written to a single ``.apkg`` archive.

    Writing does not modify the decks, notes or note types, so a package can
    be written repeatedly; with a pinned timestamp the output is reproducible.
    """

    def __init__(self, decks: Union[Deck, Iterable[Deck], None] = None,
                 media_files: Iterable[Union[MediaFile, PathLike]] = ()):
        if decks is None:
            self.decks: List[Deck] = []
        elif isinstance(decks, Deck):
            self.decks = [decks]
        else:
            self.decks = list(decks)
        self.media_files: List[MediaFile] = [MediaFile.coerce(m) for m in media_files]

    def add_deck(self, deck: Deck) -> None:
        self.decks.append(deck)

    def add_media(self, media: Union[MediaFile, PathLike]) -> None:
        self.media_files.append(MediaFile.coerce(media))

    def build_snapshot(self, timestamp: Optional[float] = None) -> CollectionSnapshot:
        if timestamp is None:
            timestamp = time.time()
        return SnapshotBuilder(timestamp, IdGenerator.from_timestamp(timestamp)).build(self.decks)

    def write(self, sink: Sink, timestamp: Optional[float] = None) -> None:
        """
        Write the package to a path or a writable binary file object.

        Args:
            sink: Destination path or binary stream
            timestamp: Seconds since the epoch used for ids and modification
                times (defaults to now)

        Raises:
            SchemaMismatchError / InvalidTagError: before anything is written
            PackageIOError: if the database, archive or a media file fails
        """
        snapshot = self.build_snapshot(timestamp)
        ContainerPacker().pack(snapshot, self.media_files, sink)

    def write_to_file(self, file: PathLike, timestamp: Optional[float] = None) -> None:
        self.write(os.fspath(file), timestamp=timestamp)
        logger.info(f"Successfully created Anki package: {file}")
