"""
Document loader for the structured parsing path.
Builds the element tree and reports failure as a ParseResult instead of raising.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from ..system.error_handling import ParseResult

logger = logging.getLogger(__name__)


def load_document(xml_content: str, source_name: Optional[str] = None) -> ParseResult:
    """
    Parse XML text into a root element.

    Success carries the root ``ET.Element``; failure carries the parser
    message so the caller can pick another parsing path.
    """
    if not xml_content or not xml_content.strip():
        return ParseResult.failure_result(["Empty XML content provided"])

    try:
        root = ET.fromstring(xml_content.strip())
    except (ET.ParseError, ValueError) as exc:
        logger.warning("XML parse failed for %s: %s", source_name or "<content>", exc)
        return ParseResult.failure_result([f"XML parse failed: {exc}"])

    return ParseResult.success_result(root)
