"""Unit tests for OCR artifact cleanup."""

from __future__ import annotations

import pytest

from label_analyzer.parsing.cleaner import clean_artifacts, truncate_at_stop_marker


pytestmark = pytest.mark.unit


class TestCleanArtifacts:
    """Tests for clean_artifacts."""

    def test_removes_leading_ingredients_label(self) -> None:
        """Should drop the "Ingredients:" prefix."""
        assert clean_artifacts("Ingredients: Water, Sugar") == "Water, Sugar"

    def test_retitles_all_caps_words_but_keeps_acronyms(self) -> None:
        """Should retitle long ALL-CAPS words and leave known acronyms alone."""
        text = "INGREDIENTS: ORGANIC WHEAT FLOUR, SEA SALT, BHT"

        assert clean_artifacts(text) == "Organic Wheat Flour, SEA Salt, BHT"

    @pytest.mark.parametrize(
        "text",
        [
            "INGREDIENTS: ORGANIC WHEAT FLOUR, SEA SALT, BHT",
            "Sugar, example.0rg",
        ],
    )
    def test_is_idempotent(self, text: str) -> None:
        """Should give the same result when applied twice."""
        once = clean_artifacts(text)

        assert clean_artifacts(once) == once

    def test_truncates_at_address_completed_by_repairs(self) -> None:
        """Should cut a web address that only reads as one after OCR repairs."""
        assert clean_artifacts("Sugar, example.0rg") == "Sugar,"

    def test_truncates_at_allergen_statement(self) -> None:
        """Should cut everything from CONTAINS: onwards."""
        assert clean_artifacts("Sugar, Salt. CONTAINS: Milk") == "Sugar, Salt."

    def test_repairs_zero_for_letter_o(self) -> None:
        """Should read a leading zero before letters as the letter o."""
        assert clean_artifacts("0rganic sugar") == "organic sugar"

    def test_collapses_whitespace(self) -> None:
        """Should collapse runs of whitespace and newlines."""
        assert clean_artifacts("Water,\n  Sugar,\t Salt") == "Water, Sugar, Salt"

    def test_empty_text(self) -> None:
        """Should return an empty string for empty input."""
        assert clean_artifacts("") == ""


class TestTruncateAtStopMarker:
    """Tests for truncate_at_stop_marker."""

    @pytest.mark.parametrize(
        "text",
        [
            "Water, Sugar. Distributed by: Acme",
            "Water, Sugar. Visit us at acme",
            "Water, Sugar www.acme.com",
            "Water, Sugar. Nutrition Facts",
        ],
    )
    def test_cuts_company_and_contact_text(self, text: str) -> None:
        """Should cut company, contact and nutrition panel text."""
        assert truncate_at_stop_marker(text).rstrip(" .") == "Water, Sugar"

    def test_uses_earliest_marker(self) -> None:
        """Should cut at whichever marker comes first."""
        text = "Salt. Nutrition Facts. CONTAINS: Milk"

        assert truncate_at_stop_marker(text) == "Salt. "

    def test_leaves_plain_list_alone(self) -> None:
        """Should return text without markers unchanged."""
        assert truncate_at_stop_marker("Water, Salt") == "Water, Salt"
