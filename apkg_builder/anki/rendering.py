"""
Template rendering for requirement inference.

Requirement inference only needs ``render(pattern, fields) -> str``; any
deterministic, side-effect-free renderer can stand in for the mustache one.
"""

import logging
from typing import Dict, Protocol

import chevron
from chevron.tokenizer import ChevronError, tokenize

from ..errors import TemplateRenderError, error_handler


logger = logging.getLogger(__name__)


class TemplateRenderer(Protocol):
    """Renders a card pattern against a mapping of field name to value."""

    def render(self, pattern: str, fields: Dict[str, str]) -> str:
        ...


class MustacheRenderer:
    """
    Mustache renderer backed by chevron.

    Anki's template language is a mustache dialect: plain substitutions,
    ``{{#Field}}`` / ``{{^Field}}`` sections and filter prefixes such as
    ``{{type:Field}}``. Unknown keys (filters included) render as empty.
    Partials (``{{>name}}``) have no meaning in a card template and are
    rejected rather than looked up on disk.
    """

    def render(self, pattern: str, fields: Dict[str, str]) -> str:
        try:
            for tag, key in tokenize(pattern):
                if tag == 'partial':
                    raise TemplateRenderError(error_handler.template_render_failure(
                        pattern, ValueError(f"partial '{key}' is not supported")))
            return chevron.render(pattern, fields)
        except ChevronError as e:
            logger.debug(f"chevron rejected template {pattern!r}: {e}")
            raise TemplateRenderError(error_handler.template_render_failure(pattern, e)) from e
