"""
Regex vocabulary for line-oriented GAEB dialects (D8x/P8x exports and free text).

Every tuple below is evaluated in order with first-match-wins semantics;
reordering entries changes parsing results.
"""

import re
from typing import Optional, Tuple

LETTERS = "A-Za-zÄÖÜäöüß"

# Longest tokens first so "m²" wins over "m" and "Stk" over "St"
UNIT_TOKENS: Tuple[str, ...] = (
    "m²", "m³", "lfm", "kWh", "psch", "Stk", "Std", "Pfl", "bgl", "cbm", "lfd",
    "EUR", "kg", "St", "qm", "to", "cm", "mm", "DM", "€", "t", "h", "m", "l",
)
CURRENCY_TOKENS = frozenset({"€", "EUR", "DM"})

# Subset allowed right after a quantity ("12 m³", "20m²")
QUANTITY_UNIT_TOKENS: Tuple[str, ...] = (
    "m²", "m³", "lfm", "psch", "Stk", "Std", "cbm", "lfd", "kg", "St", "qm", "to", "t", "h", "m",
)


def _token_alternation(tokens: Tuple[str, ...]) -> str:
    return "|".join(re.escape(t) for t in tokens)


# Units may touch a preceding digit ("20m²") but never sit inside a word
UNIT_RE = re.compile(
    rf"(?<![{LETTERS}])({_token_alternation(UNIT_TOKENS)})(?![0-9{LETTERS}²³])",
    re.IGNORECASE,
)
QUANTITY_WITH_UNIT_RE = re.compile(
    rf"\d+[,.]?\d*\s*({_token_alternation(QUANTITY_UNIT_TOKENS)})(?![0-9{LETTERS}²³])",
    re.IGNORECASE,
)

AMOUNT_WITH_CURRENCY_RE = re.compile(r"\d+[,.]\d+\s*(?:€|EUR|DM)", re.IGNORECASE)
LEADING_POSITION_NUMBER_RE = re.compile(r"^\s*\d+(\.\d+)*[A-Za-z]?\s+")
LEADING_LETTER_POSITION_RE = re.compile(r"^\s*[A-Z]\d+(\.\d+)*\s+")
LEADING_NUMBER_AND_WORD_RE = re.compile(r"^\s*\d+\s+[A-ZÜÄÖ]")
TRADE_KEYWORD_RE = re.compile(
    r"\b(Beton|Mauerwerk|Estrich|Fliesen|Putz|Anstrich|Dämmung|Installation|Montage|Lieferung)\b",
    re.IGNORECASE,
)

HEADER_EXCLUSION_KEYWORDS: Tuple[str, ...] = ("header", "projekt", "project")

# Any one of these marks a line as a position candidate
POSITION_LINE_PATTERNS: Tuple[re.Pattern, ...] = (
    LEADING_POSITION_NUMBER_RE,
    LEADING_LETTER_POSITION_RE,
    UNIT_RE,
    AMOUNT_WITH_CURRENCY_RE,
    LEADING_NUMBER_AND_WORD_RE,
    QUANTITY_WITH_UNIT_RE,
    TRADE_KEYWORD_RE,
)

POSITION_NUMBER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^\s*(\d+(?:\.\d+)*[A-Za-z]?)\s+"),
    re.compile(r"^\s*([A-Z]\d+(?:\.\d+)*)\s+"),
    re.compile(r"^\s*(\d{2,3})\s+"),
)

DECIMAL_NUMBER_RE = re.compile(r"[0-9]+[,.][0-9]+")
INTEGER_NUMBER_RE = re.compile(r"[0-9]+")
NUMBER_PATTERNS: Tuple[re.Pattern, ...] = (DECIMAL_NUMBER_RE, INTEGER_NUMBER_RE)

CURRENCY_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"(\d+[,.]\d+)\s*(?:€|EUR)", re.IGNORECASE),
    re.compile(r"(\d+[,.]\d+)\s*DM", re.IGNORECASE),
    re.compile(r"€\s*(\d+[,.]\d+)", re.IGNORECASE),
    re.compile(r"EUR\s*(\d+[,.]\d+)", re.IGNORECASE),
)

# Amount + symbol in either order, stripped from titles and from quantity candidates
CURRENCY_SUBSTRING_RE = re.compile(
    r"\d+[,.]\d*\s*(?:€|EUR|DM)|(?:€|EUR|DM)\s*\d+[,.]\d+",
    re.IGNORECASE,
)

SECTION_TITLE_LINE_RE = re.compile(r"^\s*\d+\s+[A-ZÜÄÖ][A-ZÜÄÖ\s]+$")
SUMMARY_KEYWORD_RE = re.compile(r"\b(gesamt|summe|total|zwischensumme)\b", re.IGNORECASE)
LEADING_BARE_NUMBER_RE = re.compile(r"^\d+[.\s]*")

HEADER_FIELD_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("project_name", ("project", "projekt")),
    ("version", ("version",)),
    ("date", ("date", "datum")),
    ("description", ("description", "beschreibung")),
)


def to_number(token: str) -> float:
    """Parse a German or English decimal token ("15,50" / "15.50")."""
    return float(token.replace(",", "."))


def is_currency_token(token: Optional[str]) -> bool:
    return token is not None and token.upper() in CURRENCY_TOKENS


def first_match(patterns: Tuple[re.Pattern, ...], text: str) -> Optional[re.Match]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None
