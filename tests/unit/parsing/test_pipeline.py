"""Unit tests for end-to-end label parsing."""

from __future__ import annotations

import pytest

from label_analyzer.parsing.exceptions import LabelTextError
from label_analyzer.parsing.pipeline import parse, parse_names


pytestmark = pytest.mark.unit


class TestParse:
    """Tests for parse."""

    def test_simple_list(self) -> None:
        """Should parse a plain list in label order."""
        ingredients = parse("Ingredients: Water, Sugar, Salt")

        assert [i.name for i in ingredients] == ["Water", "Sugar", "Salt"]
        assert ingredients[0].confidence == pytest.approx(0.8)
        assert all(not i.is_minor_ingredient for i in ingredients)

    def test_nested_compound_ingredients(self) -> None:
        """Should keep sub-lists of compound ingredients as modifiers."""
        ingredients = parse(
            "Enriched Flour (Wheat Flour, Niacin, Reduced Iron), Sugar, "
            "Chocolate Chips (Sugar, Cocoa Butter (Soy Lecithin)), Salt"
        )
        top_level = [i for i in ingredients if i.parent_ingredient is None]

        assert [i.name for i in top_level] == [
            "Enriched Flour",
            "Sugar",
            "Chocolate Chips",
            "Salt",
        ]
        assert top_level[0].modifiers == ["Wheat Flour, Niacin, Reduced Iron"]
        assert top_level[2].modifiers == ["Sugar, Cocoa Butter (Soy Lecithin)"]

    def test_sub_ingredients_follow_their_parent(self) -> None:
        """Should list each member of a compound ingredient after it."""
        ingredients = parse(
            "Flour, Chocolate Chips (Sugar, Soy Lecithin, Artificial Flavor), Salt"
        )

        assert [(i.name, i.parent_ingredient) for i in ingredients] == [
            ("Flour", None),
            ("Chocolate Chips", None),
            ("Sugar", "Chocolate Chips"),
            ("Soy Lecithin", "Chocolate Chips"),
            ("Artificial Flavor", "Chocolate Chips"),
            ("Salt", None),
        ]

    def test_single_parenthetical_is_not_a_sub_list(self) -> None:
        """Should not expand a parenthetical without commas."""
        ingredients = parse("Salt (Iodized), Cocoa Butter (Soy Lecithin)")

        assert [i.name for i in ingredients] == ["Salt", "Cocoa Butter"]
        assert all(i.parent_ingredient is None for i in ingredients)

    def test_sub_ingredients_inherit_minor_status_and_section(self) -> None:
        """Should carry the parent's section and minor threshold to members."""
        ingredients = parse(
            "Topping: Water, Contains 2% or less of: Seasoning (Salt, Garlic Powder)"
        )
        subs = [i for i in ingredients if i.parent_ingredient == "Seasoning"]

        assert [i.name for i in subs] == ["Salt", "Garlic Powder"]
        assert all(i.is_minor_ingredient for i in subs)
        assert [i.minor_threshold for i in subs] == [2.0, 2.0]
        assert [i.section for i in subs] == ["Topping", "Topping"]

    def test_nested_minor_marker_applies_to_later_members(self) -> None:
        """Should honor a minor marker inside a compound ingredient's list."""
        ingredients = parse("Seasoning (Salt, Less than 1% of Spices, Garlic)")

        assert [(i.name, i.minor_threshold) for i in ingredients[1:]] == [
            ("Salt", None),
            ("Spices", 1.0),
            ("Garlic", 1.0),
        ]

    def test_descriptive_clause_joins_previous_ingredient(self) -> None:
        """Should fold an "including ..." clause into the modifiers before it."""
        ingredients = parse(
            "Water, Natural Flavor, Vanilla Extract, including vanilla beans"
        )

        assert [i.name for i in ingredients] == [
            "Water",
            "Natural Flavor",
            "Vanilla Extract",
        ]
        assert ingredients[2].modifiers == ["including vanilla beans"]

    def test_minor_section(self) -> None:
        """Should flag ingredients after a minor marker."""
        ingredients = parse("Water, Sugar, Contains 2% or less of: Salt, Yeast")

        assert [i.name for i in ingredients] == ["Water", "Sugar", "Salt", "Yeast"]
        assert [i.minor_threshold for i in ingredients] == [None, None, 2.0, 2.0]
        assert [i.is_minor_ingredient for i in ingredients] == [
            False,
            False,
            True,
            True,
        ]

    def test_symbol_footnotes(self) -> None:
        """Should resolve footnote markers into name prefixes."""
        ingredients = parse("Sugar*, Cocoa Butter*, Milk. * Organic")

        assert [i.name for i in ingredients] == [
            "Organic Sugar",
            "Organic Cocoa Butter",
            "Milk",
        ]

    def test_definition_without_space_after_marker(self) -> None:
        """Should resolve a definition written directly after its marker."""
        assert parse_names("Honey*, Salt. *Organic") == ["Organic Honey", "Salt"]

    def test_marker_inside_the_list_is_not_a_definition(self) -> None:
        """Should not treat text after a name's marker as a trailing note."""
        assert parse_names("Cocoa* Organic Butter, Salt") == [
            "Cocoa Organic Butter",
            "Salt",
        ]

    def test_numbered_footnotes(self) -> None:
        """Should resolve numbered markers before parentheticals are read."""
        ingredients = parse("Sugar(1), Salt. (1) Non-GMO Verified")

        assert [i.name for i in ingredients] == ["Non-GMO Verified Sugar", "Salt"]
        assert ingredients[0].modifiers == []

    def test_case_insensitive_duplicates(self) -> None:
        """Should keep only the first of duplicate names."""
        assert parse_names("Sugar, sugar, SUGAR, Salt") == ["Sugar", "Salt"]

    def test_drops_low_confidence_tokens(self) -> None:
        """Should drop names too short to be ingredients."""
        assert parse_names("Water, xq, Salt") == ["Water", "Salt"]

    def test_expands_and_or(self) -> None:
        """Should treat "and/or" as a separator."""
        assert parse_names("Canola and/or Sunflower Oil, Salt") == [
            "Canola",
            "Sunflower Oil",
            "Salt",
        ]

    def test_stops_at_allergen_statement(self) -> None:
        """Should ignore the allergen statement."""
        assert parse_names("Flour, Sugar, Butter. CONTAINS: Wheat, Milk") == [
            "Flour",
            "Sugar",
            "Butter",
        ]

    def test_section_headers(self) -> None:
        """Should attach section headers to the ingredients beneath them."""
        ingredients = parse("Crust: Flour, Butter, Filling: Apples, Cinnamon")

        assert [(i.name, i.section) for i in ingredients] == [
            ("Flour", "Crust"),
            ("Butter", "Crust"),
            ("Apples", "Filling"),
            ("Cinnamon", "Filling"),
        ]

    def test_nutrition_panel_only(self) -> None:
        """Should return nothing for text that is not an ingredient list."""
        assert parse("Nutrition Facts Serving size 1 cup Calories 120") == []

    @pytest.mark.parametrize("text", ["", "   \x00\x01\x02\x03\x04\x05\x06"])
    def test_rejects_unusable_text(self, text: str) -> None:
        """Should raise for empty or garbage text."""
        with pytest.raises(LabelTextError):
            parse(text)
