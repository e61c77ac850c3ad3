"""
Format classifier for GAEB content.
Chooses the structured (XML) or line-based parsing path and labels the dialect.
"""

from enum import Enum
from typing import Tuple

XML_DECLARATION = "<?xml"
GAEB_ROOT_MARKER = "<GAEB"

# Label used when a document carries no detected format
DEFAULT_EXPORT_FORMAT = "X83"
UNKNOWN_FORMAT = "Unknown"

# Evaluated top to bottom, first marker found wins
XML_FORMAT_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("DA83/3.3", "X83"),
    ("DA84", "X84"),
    ("DA81", "X81"),
    (GAEB_ROOT_MARKER, "XML GAEB"),
)

TEXT_FORMAT_CODES: Tuple[str, ...] = ("D81", "D83", "D84", "P81", "P83", "X81", "X83")


class ParsingPath(str, Enum):
    STRUCTURED = "structured"
    HEURISTIC = "heuristic"


def is_structured_markup(content: str) -> bool:
    """True when the content should go through the XML parser."""
    return content.strip().startswith(XML_DECLARATION) or GAEB_ROOT_MARKER in content


def classify_content(content: str) -> ParsingPath:
    """Total: anything that is not recognisably GAEB XML goes to the line parser."""
    if is_structured_markup(content):
        return ParsingPath.STRUCTURED
    return ParsingPath.HEURISTIC


def detect_xml_format(content: str) -> str:
    for marker, label in XML_FORMAT_MARKERS:
        if marker in content:
            return label
    return "XML"


def detect_text_format(content: str) -> str:
    for code in TEXT_FORMAT_CODES:
        if code in content or code.lower() in content:
            return code
    return UNKNOWN_FORMAT
