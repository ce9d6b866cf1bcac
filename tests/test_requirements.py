"""
Tests for template requirement inference.
"""

import pytest

from apkg_builder.models import Field, RequirementRecord, Template
from apkg_builder.anki.note_type import NoteType
from apkg_builder.anki.rendering import MustacheRenderer
from apkg_builder.anki.requirements import infer_requirement, infer_requirements
from apkg_builder.anki.templates import (
    basic_optional_reversed_card_model,
    basic_type_in_the_answer_model,
)
from apkg_builder.errors import TemplateRenderError, UninferableTemplateError


class TestInferRequirement:
    """Sentinel-based inference against the mustache renderer."""

    def test_single_field_question_requires_all(self):
        record = infer_requirement(
            MustacheRenderer(), Template("Card 1", qfmt="{{Front}}"), 0, ["Front", "Back"]
        )
        assert record == RequirementRecord(0, "all", (0,))

    def test_two_independent_fields_give_any(self):
        """Either field alone renders something, so neither is required."""
        record = infer_requirement(
            MustacheRenderer(), Template("Hint", qfmt="{{Question}}{{Hint}}"), 0,
            ["Question", "Hint", "Answer"]
        )
        assert record.rule == "any"
        assert record.field_ordinals == (0, 1)

    def test_conditional_section_requires_both_fields(self):
        record = infer_requirement(
            MustacheRenderer(),
            Template("Card 2", qfmt="{{#Add Reverse}}{{Back}}{{/Add Reverse}}"),
            1,
            ["Front", "Back", "Add Reverse"],
        )
        assert record == RequirementRecord(1, "all", (1, 2))

    def test_filtered_reference_is_ignored(self):
        """``{{type:Back}}`` never renders the raw field, so only Front governs."""
        record = infer_requirement(
            MustacheRenderer(), Template("Card 1", qfmt="{{Front}}\n\n{{type:Back}}"), 0,
            ["Front", "Back"]
        )
        assert record == RequirementRecord(0, "all", (0,))

    def test_uninferable_template(self):
        """Each field only shows up when another field's section is open."""
        qfmt = "{{#A}}{{B}}{{/A}}{{#B}}{{C}}{{/B}}{{#C}}{{A}}{{/C}}"
        with pytest.raises(UninferableTemplateError) as exc_info:
            infer_requirement(MustacheRenderer(), Template("Loop", qfmt=qfmt), 0, ["A", "B", "C"], "Cyclic")

        assert exc_info.value.error_code == "TEMPLATE_001"
        assert "Loop" in exc_info.value.processing_error.details
        assert "Cyclic" in exc_info.value.processing_error.details

    def test_mismatched_section_raises_render_error(self):
        with pytest.raises(TemplateRenderError) as exc_info:
            infer_requirement(
                MustacheRenderer(), Template("Broken", qfmt="{{#Front}}x{{/Back}}"), 0, ["Front", "Back"]
            )
        assert exc_info.value.error_code == "RENDER_001"

    def test_partial_tags_are_rejected(self, tmp_path, monkeypatch):
        (tmp_path / "header.mustache").write_text("{{Front}}", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        with pytest.raises(TemplateRenderError) as exc_info:
            MustacheRenderer().render("{{>header}}{{Back}}", {"Front": "a", "Back": "b"})
        assert exc_info.value.error_code == "RENDER_001"
        assert "partial 'header'" in exc_info.value.processing_error.details

    def test_custom_sentinel(self):
        record = infer_requirement(
            MustacheRenderer(), Template("Card 1", qfmt="{{Front}}"), 0, ["Front"], sentinel="@@marker@@"
        )
        assert record == RequirementRecord(0, "all", (0,))


class TestInferRequirements:

    def test_one_record_per_template_in_order(self):
        templates = [
            Template("Card 1", qfmt="{{Front}}"),
            Template("Card 2", qfmt="{{Back}}"),
        ]
        records = infer_requirements(MustacheRenderer(), templates, ["Front", "Back"])
        assert [r.to_json() for r in records] == [[0, "all", [0]], [1, "all", [1]]]

    def test_stand_in_renderer(self, stand_in_renderer):
        """Any renderer with the same contract can drive inference."""
        records = infer_requirements(
            stand_in_renderer, [Template("Card 1", qfmt="{{Back}} / {{Front}}")], ["Front", "Back"]
        )
        assert records == [RequirementRecord(0, "any", (0, 1))]


class TestNoteTypeRequirements:
    """Requirements are inferred when the note type is created."""

    def test_optional_reversed_model(self):
        model = basic_optional_reversed_card_model()
        assert [r.to_json() for r in model.requirements] == [[0, "all", [0]], [1, "all", [1, 2]]]

    def test_type_in_the_answer_model(self):
        model = basic_type_in_the_answer_model()
        assert [r.to_json() for r in model.requirements] == [[0, "all", [0]]]

    def test_uninferable_template_rejected_at_creation(self):
        with pytest.raises(UninferableTemplateError):
            NoteType(
                1, "Cyclic",
                fields=["A", "B", "C"],
                templates=[Template("Loop", qfmt="{{#A}}{{B}}{{/A}}{{#B}}{{C}}{{/B}}{{#C}}{{A}}{{/C}}")],
            )

    def test_malformed_template_rejected_at_creation(self):
        with pytest.raises(TemplateRenderError) as exc_info:
            NoteType(
                1, "Broken",
                fields=["Front", "Back"],
                templates=[Template("Card 1", qfmt="{{#Front}}x{{/Back}}")],
            )
        assert exc_info.value.error_code == "RENDER_001"

    def test_partial_rejected_at_creation(self):
        with pytest.raises(TemplateRenderError):
            NoteType(
                1, "Included",
                fields=["Front", "Back"],
                templates=[Template("Card 1", qfmt="{{>header}}{{Front}}")],
            )

    def test_note_type_with_stand_in_renderer(self, stand_in_renderer):
        model = NoteType(
            2, "Pair",
            fields=[Field("Left"), Field("Right")],
            templates=[Template("Card 1", qfmt="{{Right}}")],
            renderer=stand_in_renderer,
        )
        assert model.requirements == (RequirementRecord(0, "all", (1,)),)

    def test_serialized_req_matches_records(self, reversed_model):
        model_json = reversed_model.to_json(1700000000.0, 1)
        assert model_json['req'] == [[0, "all", [0]], [1, "all", [1]]]


class TestRequirementRecord:

    def test_all_rule(self):
        record = RequirementRecord(0, "all", (0, 1))
        assert record.is_satisfied_by(["a", "b"])
        assert not record.is_satisfied_by(["a", ""])

    def test_any_rule(self):
        record = RequirementRecord(0, "any", (0, 1))
        assert record.is_satisfied_by(["", "b"])
        assert not record.is_satisfied_by(["", ""])

    def test_unknown_rule(self):
        with pytest.raises(ValueError):
            RequirementRecord(0, "some", (0,)).is_satisfied_by(["a"])
