"""
Tests for card generation: requirement evaluation and cloze scanning.
"""

from hypothesis import given, strategies as st

from apkg_builder.models import Card, NoteTypeKind, Template
from apkg_builder.anki.card_generation import (
    cloze_cards,
    cloze_field_names,
    cloze_ordinals,
    front_back_cards,
    generate_cards,
)
from apkg_builder.anki.note_type import NoteType
from apkg_builder.anki.templates import basic_and_reversed_card_model, cloze_model


REVERSED = basic_and_reversed_card_model()
CLOZE = cloze_model()


class TestFrontBackCards:

    def test_both_sides_filled(self, reversed_model):
        cards = front_back_cards(reversed_model, ["cat", "gato"])
        assert cards == [Card(0), Card(1)]

    def test_empty_back_skips_reverse_card(self, reversed_model):
        assert front_back_cards(reversed_model, ["cat", ""]) == [Card(0)]

    def test_all_empty_gives_no_cards(self, reversed_model):
        assert front_back_cards(reversed_model, ["", ""]) == []

    def test_any_rule_needs_one_field(self):
        model = NoteType(
            3, "Either",
            fields=["Question", "Hint"],
            templates=[Template("Card 1", qfmt="{{Question}}{{Hint}}")],
        )
        assert front_back_cards(model, ["", "hint"]) == [Card(0)]
        assert front_back_cards(model, ["", ""]) == []

    def test_suspended_ordinals(self, reversed_model):
        cards = front_back_cards(reversed_model, ["cat", "gato"], suspended=frozenset({1}))
        assert cards == [Card(0, False), Card(1, True)]

    @given(st.text(max_size=5), st.text(max_size=5))
    def test_cards_follow_non_empty_fields(self, front, back):
        ordinals = [card.ordinal for card in generate_cards(REVERSED, [front, back])]
        expected = [ordinal for ordinal, value in enumerate([front, back]) if value]
        assert ordinals == expected


class TestClozeScanning:

    def test_field_names_from_pattern(self):
        assert cloze_field_names("{{cloze:Text}}") == {"Text"}
        assert cloze_field_names("{{cloze:Text}}<br>{{cloze:Extra}}") == {"Text", "Extra"}

    def test_field_names_with_filters(self):
        assert cloze_field_names("{{furigana:cloze:Text}}") == {"Text"}

    def test_legacy_field_syntax(self):
        assert cloze_field_names("<%cloze:Text%>") == {"Text"}

    def test_ordinals_are_zero_based(self):
        assert cloze_ordinals("{{c1::a}} {{c2::b}} {{c3::c}}") == {0, 1, 2}

    def test_duplicate_groups_collapse(self):
        assert cloze_ordinals("{{c1::a}} and {{c1::b}}") == {0}

    def test_group_zero_is_discarded(self):
        assert cloze_ordinals("{{c0::a}} {{c2::b}}") == {1}

    def test_deletion_spanning_lines(self):
        assert cloze_ordinals("{{c4::first\nsecond}}") == {3}

    def test_no_markers(self):
        assert cloze_ordinals("plain text") == set()

    @given(st.sets(st.integers(min_value=1, max_value=200), min_size=1, max_size=10))
    def test_every_group_is_found(self, groups):
        text = " ".join(f"{{{{c{group}::word{group}}}}}" for group in sorted(groups))
        assert cloze_ordinals(text) == {group - 1 for group in groups}


class TestClozeCards:

    def test_one_card_per_group(self, cloze):
        cards = cloze_cards(cloze, ["{{c1::Canberra}} is the capital of {{c2::Australia}}"])
        assert {card.ordinal for card in cards} == {0, 1}

    def test_three_groups_three_cards(self, cloze):
        cards = cloze_cards(cloze, ["{{c1::a}} {{c2::b}} {{c3::c}} {{c2::d}}"])
        assert len(cards) == 3
        assert {card.ordinal for card in cards} == {0, 1, 2}

    def test_note_without_deletions_gets_first_card(self, cloze):
        assert cloze_cards(cloze, ["nothing hidden"]) == [Card(0)]

    def test_suspended_group(self, cloze):
        cards = cloze_cards(cloze, ["{{c1::a}} {{c2::b}}"], suspended=frozenset({1}))
        assert {(card.ordinal, card.suspended) for card in cards} == {(0, False), (1, True)}

    def test_deletions_in_every_referenced_field(self):
        model = NoteType(
            4, "Two cloze fields",
            fields=["Text", "Extra"],
            templates=[Template("Cloze", qfmt="{{cloze:Text}}{{cloze:Extra}}", afmt="{{cloze:Text}}")],
            kind=NoteTypeKind.CLOZE,
        )
        cards = cloze_cards(model, ["{{c1::a}}", "{{c3::b}}"])
        assert {card.ordinal for card in cards} == {0, 2}

    def test_unknown_field_reference_is_empty(self):
        model = NoteType(
            5, "Dangling",
            fields=["Text"],
            templates=[Template("Cloze", qfmt="{{cloze:Missing}}")],
            kind=NoteTypeKind.CLOZE,
        )
        assert cloze_cards(model, ["{{c2::x}}"]) == [Card(0)]

    @given(st.sets(st.integers(min_value=1, max_value=30), max_size=6))
    def test_generate_cards_dispatches_on_kind(self, groups):
        text = "".join(f"{{{{c{group}::x}}}}" for group in groups)
        ordinals = {card.ordinal for card in generate_cards(CLOZE, [text])}
        assert ordinals == ({group - 1 for group in groups} or {0})
