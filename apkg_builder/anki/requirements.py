"""
Template requirement inference.

For each front/back template we work out which fields must be non-empty for
the question side to render anything. The renderer is treated as a black
box: fields are bound to a sentinel string or blanked, and the presence of
the sentinel in the output tells us whether a field matters.
"""

import logging
from typing import List, Sequence

from ..config import Config
from ..errors import UninferableTemplateError, error_handler
from ..models import RequirementRecord, Template
from .rendering import TemplateRenderer


logger = logging.getLogger(__name__)


def _required_fields(renderer: TemplateRenderer, qfmt: str, field_names: Sequence[str],
                     sentinel: str) -> List[int]:
    """Fields whose blanking alone removes the sentinel from the output."""
    required = []
    for field_ord, name in enumerate(field_names):
        values = {other: sentinel for other in field_names}
        values[name] = ""
        if sentinel not in renderer.render(qfmt, values):
            required.append(field_ord)
    return required


def _triggering_fields(renderer: TemplateRenderer, qfmt: str, field_names: Sequence[str],
                       sentinel: str) -> List[int]:
    """Fields that make the sentinel appear when they are the only one bound."""
    triggers = []
    for field_ord, name in enumerate(field_names):
        values = {other: "" for other in field_names}
        values[name] = sentinel
        if sentinel in renderer.render(qfmt, values):
            triggers.append(field_ord)
    return triggers


def infer_requirement(renderer: TemplateRenderer, template: Template, template_ord: int,
                      field_names: Sequence[str], note_type_name: str = "",
                      sentinel: str = Config.SENTINEL) -> RequirementRecord:
    """
    Infer the requirement record of a single template.

    Args:
        renderer: Renderer used to evaluate the question pattern
        template: Template whose ``qfmt`` is analysed
        template_ord: Position of the template in its note type
        field_names: Note-type field names in order
        note_type_name: Used in error messages only
        sentinel: Marker string not expected in user content

    Returns:
        RequirementRecord with rule "all" or "any"

    Raises:
        UninferableTemplateError: if no field governs the question side
        TemplateRenderError: if the renderer cannot parse the pattern
    """
    required = _required_fields(renderer, template.qfmt, field_names, sentinel)
    if required:
        return RequirementRecord(template_ord, "all", tuple(required))

    triggers = _triggering_fields(renderer, template.qfmt, field_names, sentinel)
    if not triggers:
        raise UninferableTemplateError(
            error_handler.uninferable_template(note_type_name, template.name, template.qfmt)
        )
    return RequirementRecord(template_ord, "any", tuple(triggers))


def infer_requirements(renderer: TemplateRenderer, templates: Sequence[Template],
                       field_names: Sequence[str], note_type_name: str = "") -> List[RequirementRecord]:
    """Infer one requirement record per template, in template order."""
    records = [
        infer_requirement(renderer, template, template_ord, field_names, note_type_name)
        for template_ord, template in enumerate(templates)
    ]
    for record in records:
        logger.debug(
            f"{note_type_name or 'note type'}: template {record.template_ordinal} requires "
            f"{record.rule} of fields {list(record.field_ordinals)}"
        )
    return records
