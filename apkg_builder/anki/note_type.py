"""
Note types (Anki "models").

A note type fixes the fields and card templates shared by a family of notes.
Front/back note types infer their requirement records when they are created,
so a malformed question template is rejected before any note uses it.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..config import Config
from ..errors import SchemaMismatchError, error_handler
from ..models import Field, NoteTypeKind, RequirementRecord, Template
from .rendering import MustacheRenderer, TemplateRenderer
from .requirements import infer_requirements


logger = logging.getLogger(__name__)


def _as_field(value: Union[Field, str, Dict[str, Any]]) -> Field:
    if isinstance(value, Field):
        return value
    if isinstance(value, str):
        return Field(value)
    return Field(**value)


def _as_template(value: Union[Template, Dict[str, Any]]) -> Template:
    if isinstance(value, Template):
        return value
    return Template(**value)


class NoteType:
    """
    Schema for a family of notes.

    Fields and templates are stored as tuples and never mutated; their
    ordinals are the positions in those tuples and are only materialized
    when the note type is serialized.
    """

    def __init__(self, note_type_id: int, name: str,
                 fields: Iterable[Union[Field, str, Dict[str, Any]]],
                 templates: Iterable[Union[Template, Dict[str, Any]]],
                 css: str = Config.DEFAULT_CSS,
                 kind: NoteTypeKind = NoteTypeKind.FRONT_BACK,
                 latex_pre: str = Config.DEFAULT_LATEX_PRE,
                 latex_post: str = Config.DEFAULT_LATEX_POST,
                 sort_field_index: int = 0,
                 renderer: Optional[TemplateRenderer] = None):
        self.id = note_type_id
        self.name = name
        self.fields = tuple(_as_field(f) for f in fields)
        self.templates = tuple(_as_template(t) for t in templates)
        self.css = css
        self.kind = kind
        self.latex_pre = latex_pre
        self.latex_post = latex_post
        self.sort_field_index = sort_field_index

        duplicates = [field_name for field_name, count in Counter(self.field_names).items() if count > 1]
        if duplicates:
            raise SchemaMismatchError(error_handler.duplicate_field_names(self.name, duplicates))

        self.requirements: Tuple[RequirementRecord, ...]
        if self.kind == NoteTypeKind.FRONT_BACK:
            self.requirements = tuple(infer_requirements(
                renderer or MustacheRenderer(), self.templates, self.field_names, self.name
            ))
        else:
            self.requirements = ()

        logger.debug(
            f"Registered note type '{self.name}' ({self.id}): {len(self.fields)} fields, "
            f"{len(self.templates)} templates, kind={self.kind.name}"
        )

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def field_index(self, name: str) -> int:
        """Position of the named field, or -1 if the note type has no such field."""
        for index, f in enumerate(self.fields):
            if f.name == name:
                return index
        return -1

    def to_json(self, timestamp: float, deck_id: int) -> Dict[str, Any]:
        """Serialize to the mapping Anki stores in the collection's ``models`` blob."""
        return {
            'id': str(self.id),
            'name': self.name,
            'type': self.kind.value,
            'mod': int(timestamp),
            'usn': -1,
            'sortf': self.sort_field_index,
            'did': deck_id,
            'tmpls': [t.to_json(ordinal) for ordinal, t in enumerate(self.templates)],
            'flds': [f.to_json(ordinal) for ordinal, f in enumerate(self.fields)],
            'css': self.css,
            'latexPre': self.latex_pre,
            'latexPost': self.latex_post,
            'latexsvg': False,
            'req': [record.to_json() for record in self.requirements],
            'tags': [],
            'vers': [],
        }

    def __repr__(self) -> str:
        return f"NoteType(id={self.id!r}, name={self.name!r}, kind={self.kind.name})"
