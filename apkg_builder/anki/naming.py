"""
Id derivation and package naming.

Anki keys decks and note types by integer id, so ids derived from names must
be stable across runs and unique within one package.
"""

import hashlib
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Set

from ..config import Config


logger = logging.getLogger(__name__)

MAX_ID = 2147483647  # Max 32-bit signed int


def stable_id(text: str) -> int:
    """Deterministic positive 31-bit id for a name."""
    digest = hashlib.sha1(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % MAX_ID or 1


class UniqueNamingManager:
    """
    Hands out ids that are stable per name and unique per manager.
    """

    def __init__(self, existing_ids: Optional[Iterable[int]] = None):
        self._used_ids: Set[int] = set(existing_ids or ())

    def register_existing_ids(self, ids: Iterable[int]) -> None:
        for id_val in ids:
            self._used_ids.add(id_val)

    def id_for(self, name: str) -> int:
        """Derive an id from a name, stepping forward past collisions."""
        unique_id = stable_id(name)
        while unique_id in self._used_ids:
            unique_id = unique_id % MAX_ID + 1
        self._used_ids.add(unique_id)
        logger.debug(f"Generated id {unique_id} for '{name}'")
        return unique_id


def sanitize_package_filename(filename: Optional[str] = None) -> str:
    """
    Make a filesystem-safe ``.apkg`` filename.

    Args:
        filename: Desired name, with or without extension (auto-generated if None)

    Returns:
        Sanitized filename ending in ``.apkg``
    """
    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"deck_{timestamp}"

    if not filename.lower().endswith(Config.PACKAGE_EXTENSION):
        filename += Config.PACKAGE_EXTENSION

    sanitized = re.sub(r'[<>:"/\\|?*\s]', '_', filename)
    sanitized = re.sub(r'_+', '_', sanitized)
    sanitized = sanitized.strip('_.')

    if not sanitized or sanitized.lower() == Config.PACKAGE_EXTENSION.lstrip('.'):
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        sanitized = f"deck_{timestamp}{Config.PACKAGE_EXTENSION}"

    return sanitized


def default_output_path(deck_file: Path, output_dir: Optional[Path] = None) -> Path:
    """Output path for a deck file when none is given: same stem, ``.apkg``."""
    directory = output_dir if output_dir is not None else deck_file.parent
    return directory / sanitize_package_filename(deck_file.stem)
