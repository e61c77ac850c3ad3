"""
Structured parser for GAEB DA XML (X81/X83/X84).

Walks Award/BoQ/BoQBody, emitting one title node per BoQCtgy followed by its
items. Display numbering is synthesized as <category>.<item> so gaps or
restarts in the source RNoPart values do not affect ordering.
"""

import math
import xml.etree.ElementTree as ET
from dataclasses import replace
from typing import List, Optional, Tuple

from ...metadata.models import DocumentHeader, ParsedDocument, PositionIdRegistry, PositionNode, PositionType
from ...system.error_handling import ParseResult, log_node_extraction_failure
from ..document_loader import load_document
from ..format_classifier import detect_xml_format
from ..line_patterns import is_currency_token
from ..namespace_utils import (
    children_excluding,
    element_text,
    find_local,
    find_path,
    get_attr_any,
    get_child_text_any,
    iter_local,
    local_name,
    namespace_uri,
)

UNKNOWN_CATEGORY_TITLE = "Unknown Category"
MAX_TITLE_LENGTH = 100
PROJECT_NAME_TAGS = ["Project", "Name", "Title"]


def parse_quantity(text: Optional[str]) -> Optional[float]:
    """Parse a Qty value; anything unparseable is None rather than zero."""
    if text is None or not text.strip():
        return None
    cleaned = text.strip()
    for candidate in (cleaned, cleaned.replace(",", ".")):
        try:
            value = float(candidate)
        except ValueError:
            continue
        return value if math.isfinite(value) else None
    return None


def _category_ordinal(category: ET.Element, index: int) -> int:
    rno_part = get_attr_any(category, ["RNoPart"])
    try:
        return int(rno_part.strip())
    except ValueError:
        return index


def _truncate(text: str, limit: int = MAX_TITLE_LENGTH) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def extract_header(root: ET.Element, content: str) -> DocumentHeader:
    version = None
    gaeb = find_local(root, "GAEB")
    if gaeb is not None:
        version = namespace_uri(gaeb.tag) or get_attr_any(gaeb, ["xmlns", "Version"]) or "Unknown"

    project_name = get_child_text_any(find_local(root, "Award"), PROJECT_NAME_TAGS)
    prj_info = find_local(root, "PrjInfo")
    if not project_name:
        project_name = get_child_text_any(prj_info, ["NamePrj"])

    return DocumentHeader(
        version=version,
        project_name=project_name or None,
        description=get_child_text_any(prj_info, ["LblPrj"]) or None,
        date=element_text(find_path(root, ["GAEBInfo", "Date"])) or None,
        detected_format=detect_xml_format(content),
    )


def _category_title(category: ET.Element) -> str:
    label = None
    for child in category:
        if local_name(child.tag) == "LblTx":
            label = child
            break
    if label is None:
        return UNKNOWN_CATEGORY_TITLE
    for preferred in ("span", "p"):
        node = find_local(label, preferred)
        if node is not None:
            return element_text(node) or UNKNOWN_CATEGORY_TITLE
    return element_text(label) or UNKNOWN_CATEGORY_TITLE


def parse_category(category: ET.Element, index: int, ordinal: int) -> PositionNode:
    return PositionNode(
        id=get_attr_any(category, ["ID"]) or f"cat_{index}",
        position_number=str(ordinal),
        title=_category_title(category),
        level=0,
        type=PositionType.TITLE,
    )


def _outline_title(description: Optional[ET.Element]) -> str:
    outline = find_path(description, ["OutlineText", "TextOutlTxt"])
    if outline is None:
        return ""
    span = find_local(outline, "span")
    return element_text(span if span is not None else outline)


def _detail_paragraphs(description: Optional[ET.Element]) -> List[str]:
    detail = find_local(description, "DetailTxt")
    if detail is None:
        return []
    paragraphs = [element_text(p) for p in iter_local(detail, "p")]
    if not paragraphs:
        paragraphs = [element_text(span) for span in iter_local(detail, "span")] or [element_text(detail)]
    return [text for text in paragraphs if text]


def parse_item(
    item: ET.Element,
    item_ordinal: int,
    category_ordinal: int,
    parent_id: Optional[str],
) -> PositionNode:
    # RNoPart only feeds fallback id and title, never the display number
    rno_part = get_attr_any(item, ["RNoPart"]).strip() or str(item_ordinal)

    qty = find_local(item, "Qty")
    quantity = parse_quantity(qty.text) if qty is not None else None
    unit = element_text(find_local(item, "QU")) or None
    if is_currency_token(unit):
        unit = None

    description_elem = find_local(item, "Description")
    paragraphs = _detail_paragraphs(description_elem)
    title = _outline_title(description_elem)
    if not title and paragraphs:
        title = _truncate(paragraphs[0])

    return PositionNode(
        id=get_attr_any(item, ["ID"]) or f"item_{rno_part}",
        position_number=f"{category_ordinal}.{item_ordinal}",
        title=title or f"Position {rno_part}",
        description=" ".join(paragraphs) or None,
        unit=unit,
        quantity=quantity,
        level=1,
        type=PositionType.POSITION,
        parent=parent_id,
    )


def extract_positions(root: ET.Element) -> Tuple[List[PositionNode], List[str]]:
    """Return positions in document order plus warnings for skipped nodes."""
    positions: List[PositionNode] = []
    warnings: List[str] = []
    ids = PositionIdRegistry()

    boq = find_local(root, "BoQ")
    if boq is None:
        return positions, warnings

    for index, category in enumerate(iter_local(boq, "BoQCtgy"), start=1):
        ordinal = _category_ordinal(category, index)
        category_id: Optional[str] = None
        try:
            node = parse_category(category, index, ordinal)
            category_id = ids.claim(node.id)
            positions.append(replace(node, id=category_id))
        except Exception as exc:
            message = f"Skipping category {index}: {exc}"
            log_node_extraction_failure(f"parse_category {index}", exc)
            warnings.append(message)

        for item_ordinal, item in enumerate(children_excluding(category, "Item", stop_at="BoQCtgy"), start=1):
            try:
                node = parse_item(item, item_ordinal, ordinal, category_id)
                positions.append(replace(node, id=ids.claim(node.id)))
            except Exception as exc:
                message = f"Skipping item {ordinal}.{item_ordinal}: {exc}"
                log_node_extraction_failure(f"parse_item {ordinal}.{item_ordinal}", exc)
                warnings.append(message)

    return positions, warnings


def parse_xml_document(content: str, file_name: str) -> ParseResult:
    """
    Parse GAEB DA XML into a ParsedDocument.

    A malformed document yields a failure result and nothing else, so the
    caller can hand the raw text to the line parser.
    """
    loaded = load_document(content, source_name=file_name)
    if not loaded.success:
        return ParseResult.failure_result(loaded.errors)

    root = loaded.data
    positions, warnings = extract_positions(root)
    document = ParsedDocument.build(
        header=extract_header(root, content),
        positions=positions,
        raw_content=content,
        file_name=file_name,
    )
    if warnings:
        return ParseResult.partial_result(document, warnings)
    return ParseResult.success_result(document)
