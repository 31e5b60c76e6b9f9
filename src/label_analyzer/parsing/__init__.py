"""Label text parsing: cleanup, footnotes, minor sections, splitting."""

from label_analyzer.parsing.cleaner import clean_artifacts
from label_analyzer.parsing.exceptions import (
    IngredientNameError,
    LabelTextError,
    ParsingError,
)
from label_analyzer.parsing.footnotes import (
    FootnoteMap,
    apply_footnotes,
    extract_footnotes,
)
from label_analyzer.parsing.ingredient import parse_ingredient
from label_analyzer.parsing.minor_sections import (
    MinorSection,
    tag_minor_sections,
    threshold_for,
)
from label_analyzer.parsing.pipeline import parse, parse_names
from label_analyzer.parsing.quality import (
    validate_ingredient_list,
    validate_ocr_extraction,
)
from label_analyzer.parsing.sanitize import (
    sanitize_ingredient_name,
    validate_extracted_text,
)
from label_analyzer.parsing.splitter import (
    count_top_level_separators,
    split_top_level,
)


__all__ = [
    "FootnoteMap",
    "IngredientNameError",
    "LabelTextError",
    "MinorSection",
    "ParsingError",
    "apply_footnotes",
    "clean_artifacts",
    "count_top_level_separators",
    "extract_footnotes",
    "parse",
    "parse_ingredient",
    "parse_names",
    "sanitize_ingredient_name",
    "split_top_level",
    "tag_minor_sections",
    "threshold_for",
    "validate_extracted_text",
    "validate_ingredient_list",
    "validate_ocr_extraction",
]
