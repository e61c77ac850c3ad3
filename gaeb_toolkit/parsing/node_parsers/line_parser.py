"""
Heuristic parser for line-oriented GAEB dialects.

Lines are read top to bottom in two modes: header lines feed DocumentHeader
fields until the first line that looks like a position, after which every
position-like line becomes a PositionNode. Extraction and classification
rules come from line_patterns and are applied first-match-wins.
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...metadata.models import DocumentHeader, ParsedDocument, PositionIdRegistry, PositionNode, PositionType
from ...system.error_handling import log_node_extraction_failure
from ..format_classifier import detect_text_format
from ..line_patterns import (
    CURRENCY_PATTERNS,
    CURRENCY_SUBSTRING_RE,
    HEADER_EXCLUSION_KEYWORDS,
    HEADER_FIELD_KEYWORDS,
    LEADING_BARE_NUMBER_RE,
    NUMBER_PATTERNS,
    POSITION_LINE_PATTERNS,
    POSITION_NUMBER_PATTERNS,
    SECTION_TITLE_LINE_RE,
    SUMMARY_KEYWORD_RE,
    UNIT_RE,
    first_match,
    is_currency_token,
    to_number,
)

logger = logging.getLogger(__name__)

DESCRIPTION_LOOKAHEAD = 2
MIN_DESCRIPTION_LENGTH = 10
TEXT_LINE_MIN_LENGTH = 80
INDENT_WIDTH = 4


class ParserMode(Enum):
    HEADER = "header"
    POSITIONS = "positions"


@dataclass(frozen=True)
class LineFeatures:
    """Raw signals pulled from one line before classification."""
    raw: str
    trimmed: str
    position_number: Optional[str]
    numbers: Tuple[float, ...]
    unit_token: Optional[str]
    currency_amount: Optional[float]


PriceFields = Tuple[Optional[float], Optional[float], Optional[float]]


def looks_like_position(line: str) -> bool:
    trimmed = line.strip()
    if len(trimmed) < 3:
        return False
    lowered = trimmed.lower()
    if any(keyword in lowered for keyword in HEADER_EXCLUSION_KEYWORDS):
        return False
    return any(pattern.search(line) for pattern in POSITION_LINE_PATTERNS)


def extract_value(line: str) -> str:
    """Everything after the first colon, or the whole line when there is none."""
    _, sep, value = line.partition(":")
    return value.strip() if sep else line


def extract_position_number(line: str) -> Optional[str]:
    match = first_match(POSITION_NUMBER_PATTERNS, line)
    return match.group(1) if match else None


def extract_currency_amount(line: str) -> Optional[float]:
    match = first_match(CURRENCY_PATTERNS, line)
    return to_number(match.group(1)) if match else None


def extract_unit_token(line: str) -> Optional[str]:
    match = UNIT_RE.search(line)
    return match.group(1) if match else None


def _strip_position_number(text: str, position_number: Optional[str]) -> str:
    if not position_number:
        return text
    return re.sub(rf"^\s*{re.escape(position_number)}\s*", "", text, count=1)


def extract_numbers(line: str, position_number: Optional[str]) -> Tuple[float, ...]:
    """
    Plain numbers of a line, excluding its position number and currency amounts.

    Decimal tokens are used when any exist, otherwise integer tokens; the two
    kinds are never mixed.
    """
    candidate_text = CURRENCY_SUBSTRING_RE.sub(" ", _strip_position_number(line, position_number))
    for pattern in NUMBER_PATTERNS:
        tokens = pattern.findall(candidate_text)
        if tokens:
            return tuple(to_number(token) for token in tokens)
    return ()


def extract_features(line: str) -> LineFeatures:
    position_number = extract_position_number(line)
    return LineFeatures(
        raw=line,
        trimmed=line.strip(),
        position_number=position_number,
        numbers=extract_numbers(line, position_number),
        unit_token=extract_unit_token(line),
        currency_amount=extract_currency_amount(line),
    )


TYPE_RULES: Tuple[Tuple[Callable[[LineFeatures], bool], PositionType], ...] = (
    (lambda f: SECTION_TITLE_LINE_RE.match(f.trimmed) is not None, PositionType.TITLE),
    (
        lambda f: f.position_number is None and len(f.trimmed) > TEXT_LINE_MIN_LENGTH and f.currency_amount is None,
        PositionType.TEXT,
    ),
    (lambda f: f.currency_amount is not None or f.unit_token is not None, PositionType.POSITION),
    (lambda f: SUMMARY_KEYWORD_RE.search(f.trimmed) is not None, PositionType.CALCULATION),
)


def classify_line(features: LineFeatures) -> PositionType:
    for predicate, node_type in TYPE_RULES:
        if predicate(features):
            return node_type
    return PositionType.POSITION


def _single_number_with_price(numbers: Sequence[float], amount: Optional[float]) -> PriceFields:
    quantity = numbers[0]
    return quantity, amount, quantity * amount


def _many_numbers_with_price(numbers: Sequence[float], amount: Optional[float]) -> PriceFields:
    # Second number is taken as the printed total, not recomputed
    return numbers[0], amount, numbers[1]


def _many_numbers_without_price(numbers: Sequence[float], amount: Optional[float]) -> PriceFields:
    quantity = numbers[0]
    largest = max(numbers[1:])
    if largest > 1:
        unit_price = largest / quantity if quantity else None
        return quantity, unit_price, largest
    return quantity, None, None


def _single_number_without_price(numbers: Sequence[float], amount: Optional[float]) -> PriceFields:
    return numbers[0], None, None


PRICE_RULES: Tuple[Tuple[Callable[[Sequence[float], Optional[float]], bool], Callable[..., PriceFields]], ...] = (
    (lambda n, amount: amount is not None and len(n) == 1, _single_number_with_price),
    (lambda n, amount: amount is not None and len(n) >= 2, _many_numbers_with_price),
    (lambda n, amount: amount is None and len(n) >= 2, _many_numbers_without_price),
    (lambda n, amount: amount is None and len(n) == 1, _single_number_without_price),
)


def derive_prices(numbers: Sequence[float], amount: Optional[float]) -> PriceFields:
    """Return (quantity, unit_price, total_price) from plain numbers and a currency amount."""
    for predicate, handler in PRICE_RULES:
        if predicate(numbers, amount):
            return handler(numbers, amount)
    return None, None, None


def derive_title(features: LineFeatures, ordinal: int) -> str:
    title = _strip_position_number(features.trimmed, features.position_number)
    if features.currency_amount is not None:
        title = CURRENCY_SUBSTRING_RE.sub("", title)
    unit = features.unit_token
    if unit and not is_currency_token(unit):
        title = re.sub(rf"\d+[,.]?\d*\s*{re.escape(unit)}(?![A-Za-zÄÖÜäöüß])", "", title, flags=re.IGNORECASE)
    title = " ".join(title.split())

    if len(title) < 3:
        title = LEADING_BARE_NUMBER_RE.sub("", features.trimmed).strip() or f"Position {ordinal}"
    return title


def derive_level(features: LineFeatures) -> int:
    """Indent // INDENT_WIDTH of the raw line, raised to the dot count of the position number."""
    expanded = features.raw.expandtabs(INDENT_WIDTH)
    level = (len(expanded) - len(expanded.lstrip())) // INDENT_WIDTH
    if features.position_number:
        level = max(level, features.position_number.count("."))
    return level


def find_description(lines: Sequence[str], index: int) -> Optional[str]:
    """First of the next two lines that is not itself a position and is long enough."""
    for next_line in lines[index + 1:index + 1 + DESCRIPTION_LOOKAHEAD]:
        if not looks_like_position(next_line) and len(next_line.strip()) > MIN_DESCRIPTION_LENGTH:
            return next_line.strip()
    return None


def parse_line(line: str, ordinal: int, lines: Sequence[str], index: int) -> Optional[PositionNode]:
    """
    Turn one candidate line into a PositionNode.

    ``ordinal`` is the 1-based count of candidate lines so far and feeds the
    synthesized ``pos_<n>`` id and ``Position <n>`` title. Returns None when
    extraction fails.
    """
    try:
        features = extract_features(line)
        node_type = classify_line(features)

        quantity = unit_price = total_price = None
        if node_type is PositionType.POSITION:
            quantity, unit_price, total_price = derive_prices(features.numbers, features.currency_amount)

        unit = features.unit_token
        return PositionNode(
            id=features.position_number or f"pos_{ordinal}",
            position_number=features.position_number,
            title=derive_title(features, ordinal),
            description=find_description(lines, index),
            unit=None if is_currency_token(unit) else unit,
            quantity=quantity,
            unit_price=unit_price,
            total_price=total_price,
            level=derive_level(features),
            type=node_type,
        )
    except Exception as exc:
        log_node_extraction_failure(f"parse_line {line!r}", exc)
        return None


def _apply_header_line(fields: Dict[str, str], line: str) -> None:
    # Later matching lines overwrite earlier ones
    lowered = line.lower()
    for field_name, keywords in HEADER_FIELD_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            fields[field_name] = extract_value(line)
            return


def parse_text_document(content: str, file_name: str) -> ParsedDocument:
    """Parse a line-oriented GAEB file (or anything that is not GAEB XML)."""
    # Trimmed lines carry no indentation, so level comes from the position number
    lines: List[str] = [line.strip() for line in content.split("\n") if line.strip()]
    header_fields: Dict[str, str] = {}
    positions: List[PositionNode] = []
    ids = PositionIdRegistry()
    mode = ParserMode.HEADER
    candidate_count = 0
    current_category: Optional[str] = None

    for index, line in enumerate(lines):
        if mode is ParserMode.HEADER:
            _apply_header_line(header_fields, line)
            if looks_like_position(line):
                mode = ParserMode.POSITIONS

        if mode is ParserMode.POSITIONS and looks_like_position(line):
            candidate_count += 1
            node = parse_line(line, candidate_count, lines, index)
            if node is None:
                continue
            node = replace(node, id=ids.claim(node.id), parent=None if node.is_category else current_category)
            if node.is_category:
                current_category = node.id
            positions.append(node)

    logger.debug("Parsed %d positions from %s", len(positions), file_name)
    return ParsedDocument.build(
        header=DocumentHeader(detected_format=detect_text_format(content), **header_fields),
        positions=positions,
        raw_content=content,
        file_name=file_name,
    )
