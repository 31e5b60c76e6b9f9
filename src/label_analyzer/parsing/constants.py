"""Vocabulary and patterns shared by the label text parsing stages."""

from __future__ import annotations

import re
from typing import Final


# Input limits
MAX_LABEL_TEXT_LENGTH: Final[int] = 50_000
MAX_INGREDIENT_NAME_LENGTH: Final[int] = 200
MIN_SANITIZED_RATIO: Final[float] = 0.5

# Parsed ingredient bounds
MIN_NAME_LENGTH: Final[int] = 2
MAX_NAME_LENGTH: Final[int] = 150
MIN_KEPT_CONFIDENCE: Final[float] = 0.2
DEFAULT_MINOR_THRESHOLD: Final[float] = 2.0

# Acronyms that keep their capitalization when ALL-CAPS words are retitled
ACRONYMS: Final[frozenset[str]] = frozenset(
    {"USDA", "FDA", "GMO", "BHA", "BHT", "TBHQ", "EDTA"}
)

# Text after any of these is allergen, company, contact or nutrition panel text
STOP_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\b(?:CONTAINS|ALLERGENS?)\s*:",
        r"\bALLERGEN\s+WARNING\s*:",
        r"\bALLERGY\s+INFORMATION\s*:",
        r"\bMAY\s+CONTAIN\s*:",
        r"\b(?:PROCESSED|MADE)\s+IN\s+A\s+FACILITY\s*that\b",
        r"\b(?:DISTRIBUTED|MANUFACTURED|PRODUCED)\s+BY\s*:",
        r"\bQUESTIONS\?",
        r"\bVISIT\s+US\s+(?:AT|@)",
        r"\bPHONE\s*:",
        r"\bEMAIL\s*:",
        r"\b(?:www\.|\w+\.com\b|\w+\.org\b|\w+\.net\b)",
        r"@\w+",
        r"\b1-800-",
        r"\(800\)",
        r"\btel:",
        r"\bCALL\s+(?:US|NOW)\b",
        r"\bWRITE\s+TO\s+US\b",
        r"\bCONTACT\s+US\b",
        r"\bNUTRITION\s+FACTS\b",
        r"\bSUPPLEMENT\s+FACTS\b",
        r"\bAMOUNT\s+PER\s+SERVING\b",
    )
)

# Footnotes
FOOTNOTE_SYMBOLS: Final[str] = "*†‡§¶#"

CERTIFICATION_KEYWORDS: Final[tuple[str, ...]] = (
    "organic",
    "fair trade",
    "fairtrade",
    "non-gmo",
    "non gmo",
    "gluten free",
    "gluten-free",
    "certified",
    "verified",
    "kosher",
    "halal",
    "trivial",
    "cholesterol",
    "source",
    "usda",
    "rainforest alliance",
)

# Footnote meanings that carry no information about the ingredient itself
TRIVIAL_FOOTNOTE_KEYWORDS: Final[tuple[str, ...]] = ("trivial", "cholesterol", "source")

FOOTER_NOTE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^\*\s*organic$",
        r"^†\s*fair\s*trade$",
        r"^\*\s*organic\s*†\s*fair\s*trade$",
        r"^†\s*fair\s*trade\s*\*\s*organic$",
        r"^\*\s*organic\s+(?:ingredients?|certification)",
        r"^†\s*fair\s*trade\s+(?:ingredients?|certification|certified)",
    )
)

# Minor ingredient markers: "less than 2% of", "2% or less of the following:"
MINOR_MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:contains?\s+)?"
    r"(?:less\s+than\s+(\d+(?:\.\d+)?)\s*%|(\d+(?:\.\d+)?)\s*%\s+(?:or\s+)?less)"
    r"\s*(?:of\s+)?(?:each\s+of\s+)?(?:the\s+following:\s*)?",
    re.IGNORECASE,
)

# Section headers: "Organic Filling: wheat flour, ..." or a bare "Crust:"
SECTION_HEADER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^([A-Z][A-Za-z\s]+?):\s*(.+)$", re.DOTALL
)
STANDALONE_SECTION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^([A-Z][A-Za-z\s]+?):\s*$"
)

# Comma clauses that describe the preceding name rather than a new ingredient
DESCRIPTIVE_CLAUSE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:including|such as|like|e\.g\.|contains?|with)\b", re.IGNORECASE
)

ALIAS_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"formerly|also known|aka", re.IGNORECASE
)
TRADEMARK_SYMBOLS: Final[str] = "®™©"

THRESHOLD_MODIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\d+(?:\.\d+)?\s*%?\s+or\s+(?:less|more)$", re.IGNORECASE
)

_STREET_NAMES = (
    "eagle|main|oak|pine|elm|maple|cedar|park|lake|hill|washington|lincoln"
    "|first|second|third|fourth|fifth|sixth|seventh|eighth|ninth|tenth"
)
_STREET_SUFFIXES = (
    "rd|road|st|street|ave|avenue|blvd|boulevard|dr|drive|ln|lane|ct|court"
    "|pl|place|way|circle|cir"
)

# Tokens matching any of these are label boilerplate, never ingredients
REJECT_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^\d+\s*(?:mg|g|ml|oz|lb|kg|l|mcg|iu)\b", re.IGNORECASE),
    re.compile(r"^\d+(?:\.\d+)?%$"),
    re.compile(r"^\d+(?:\.\d+)?%?\s+or\s+(?:less|more)\b", re.IGNORECASE),
    re.compile(r"^\d+\s*(?:mg|g|ml|mcg|iu)$", re.IGNORECASE),
    re.compile(r"^(?:mg|g|ml|l|oz|lb|kg)$", re.IGNORECASE),
    re.compile(r"\bcalories?\b", re.IGNORECASE),
    re.compile(r"\bdaily\s*value\b", re.IGNORECASE),
    re.compile(r"\bnutrition\b", re.IGNORECASE),
    re.compile(r"\bserving\b", re.IGNORECASE),
    re.compile(r"^\d+%"),
    re.compile(
        rf"\d+\s+(?:{_STREET_NAMES})\s+(?:{_STREET_SUFFIXES})\b", re.IGNORECASE
    ),
    re.compile(r"^[A-Z]{2}\s+\d{4,5}(?:\s+(?:USA|US))?$", re.IGNORECASE),
    re.compile(
        r"^(?:produced|distributed|manufactured|certified|chat|talk)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:COMPANY|CORPORATION|LLC|INC|LTD)\b|\b(?:CO|CORP)\.", re.IGNORECASE
    ),
)

# "contains soy" style fragments; long ones are usually real ingredients
CONTAINS_FRAGMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:contains|may contain)\b", re.IGNORECASE
)
MAX_CONTAINS_FRAGMENT_LENGTH: Final[int] = 30

# Confidence scoring
COMMON_INGREDIENT_WORDS: Final[tuple[str, ...]] = (
    "organic", "natural", "sugar", "salt", "oil", "water", "flour", "milk",
    "egg", "wheat", "corn", "rice", "soy", "coconut", "olive", "sunflower",
    "canola", "vanilla", "cocoa", "chocolate", "butter", "cream", "cheese",
    "yogurt", "lemon", "lime", "orange", "apple", "banana", "strawberry",
    "blueberry", "cinnamon", "ginger", "garlic", "onion", "tomato", "carrot",
    "celery", "baking", "soda", "powder", "yeast", "starch", "syrup", "honey",
    "molasses", "vinegar", "citric", "acid", "lecithin", "gum", "xanthan",
    "guar", "carrageenan", "preservative", "color", "flavor", "extract",
    "essence", "spice", "herb",
)  # fmt: skip

BASE_CONFIDENCE: Final[float] = 0.3
COMMON_WORD_BONUS: Final[float] = 0.3
MODIFIER_BONUS: Final[float] = 0.15
CASING_BONUS: Final[float] = 0.1
LENGTH_BONUS: Final[float] = 0.1
SHORT_NAME_PENALTY: Final[float] = 0.3
LONG_NAME_PENALTY: Final[float] = 0.2
DIGIT_PENALTY: Final[float] = 0.2
MIN_CONFIDENCE: Final[float] = 0.1
MAX_CONFIDENCE: Final[float] = 1.0

# OCR quality
LOW_OCR_CONFIDENCE: Final[float] = 0.7
MIN_EXPECTED_INGREDIENTS: Final[int] = 3
MIN_EXTRACTED_TEXT_LENGTH: Final[int] = 20
MAX_FOCUSED_TEXT_LENGTH: Final[int] = 2000
VALID_LIST_CONFIDENCE: Final[float] = 0.4
