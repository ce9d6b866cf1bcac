"""
Tests for built-in note types, field formatting and naming helpers.
"""

from pathlib import Path

import pytest

from apkg_builder.models import Field, NoteTypeKind, Template
from apkg_builder.anki.naming import (
    MAX_ID,
    UniqueNamingManager,
    default_output_path,
    sanitize_package_filename,
    stable_id,
)
from apkg_builder.anki.note_type import NoteType
from apkg_builder.anki.templates import BUILTIN_NOTE_TYPES, CardFormatter
from apkg_builder.errors import SchemaMismatchError


class TestBuiltinNoteTypes:

    @pytest.mark.parametrize("key", sorted(BUILTIN_NOTE_TYPES))
    def test_builtins_construct(self, key):
        model = BUILTIN_NOTE_TYPES[key]()
        assert model.name.endswith("(apkg-builder)")
        assert model.templates

    def test_builtin_ids_are_distinct(self):
        ids = [factory().id for factory in BUILTIN_NOTE_TYPES.values()]
        assert len(set(ids)) == len(ids)

    def test_cloze_has_no_requirements(self):
        model = BUILTIN_NOTE_TYPES['cloze']()
        assert model.kind == NoteTypeKind.CLOZE
        assert model.requirements == ()
        assert model.to_json(0, 1)['req'] == []


class TestNoteType:

    def test_fields_from_strings_and_dicts(self):
        model = NoteType(
            8, "Mixed",
            fields=["Front", {'name': "Back", 'rtl': True}],
            templates=[{'name': "Card 1", 'qfmt': "{{Front}}"}],
        )
        assert model.fields == (Field("Front"), Field("Back", rtl=True))
        assert model.templates == (Template("Card 1", qfmt="{{Front}}"),)

    def test_duplicate_field_names(self):
        with pytest.raises(SchemaMismatchError) as exc_info:
            NoteType(9, "Twice", fields=["A", "A"], templates=[Template("Card 1", qfmt="{{A}}")])
        assert exc_info.value.error_code == "SCHEMA_002"

    def test_field_index(self, capitals_model):
        assert capitals_model.field_index("Capital") == 1
        assert capitals_model.field_index("Population") == -1

    def test_ordinals_assigned_on_serialization(self, reversed_model):
        model_json = reversed_model.to_json(1700000000.0, 42)

        assert model_json['id'] == str(reversed_model.id)
        assert model_json['did'] == 42
        assert model_json['mod'] == 1700000000
        assert [t['ord'] for t in model_json['tmpls']] == [0, 1]
        assert [f['ord'] for f in model_json['flds']] == [0, 1]
        assert [f['name'] for f in model_json['flds']] == ["Front", "Back"]


class TestCardFormatter:

    def test_sound(self):
        assert CardFormatter.sound("paris.mp3") == "[sound:paris.mp3]"

    def test_image(self):
        assert CardFormatter.image("flag.png") == '<img src="flag.png">'
        assert CardFormatter.image("flag.png", alt='the "tricolore"') == (
            '<img src="flag.png" alt="the &quot;tricolore&quot;">'
        )

    def test_cloze(self):
        assert CardFormatter.cloze("Paris", 1) == "{{c1::Paris}}"
        assert CardFormatter.cloze("Paris", 2, hint="city") == "{{c2::Paris::city}}"

    def test_cloze_group_below_one_warns(self, caplog):
        CardFormatter.cloze("Paris", 0)
        assert "below 1" in caplog.text

    def test_formatted_fields_drive_cards(self):
        from apkg_builder.anki.note import Note

        text = f"{CardFormatter.cloze('Paris', 1)} is in {CardFormatter.cloze('France', 3, hint='country')}"
        note = Note(BUILTIN_NOTE_TYPES['cloze'](), [text + CardFormatter.sound("paris.mp3")])
        assert sorted(card.ordinal for card in note.cards) == [0, 2]


class TestNaming:

    def test_stable_id(self):
        assert stable_id("deck:Spanish") == stable_id("deck:Spanish")
        assert 0 < stable_id("deck:Spanish") <= MAX_ID

    def test_collisions_step_forward(self):
        taken = stable_id("deck:Spanish")
        manager = UniqueNamingManager([taken])
        assert manager.id_for("deck:Spanish") == taken % MAX_ID + 1

    def test_same_name_twice_gets_new_id(self):
        manager = UniqueNamingManager()
        assert manager.id_for("deck:A") != manager.id_for("deck:A")

    @pytest.mark.parametrize("filename, expected", [
        ("spanish words", "spanish_words.apkg"),
        ("deck.apkg", "deck.apkg"),
        ("a/b:c", "a_b_c.apkg"),
    ])
    def test_sanitize_package_filename(self, filename, expected):
        assert sanitize_package_filename(filename) == expected

    def test_generated_filename(self):
        name = sanitize_package_filename()
        assert name.startswith("deck_") and name.endswith(".apkg")

    def test_default_output_path(self):
        assert default_output_path(Path("decks/spanish.yaml")) == Path("decks/spanish.apkg")
        assert default_output_path(Path("decks/spanish.yaml"), Path("out")) == Path("out/spanish.apkg")
