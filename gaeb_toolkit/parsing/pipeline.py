"""
Parsing pipeline entrypoints.
Routes content to the XML or line parser and always returns a ParsedDocument.
"""

from ..metadata.models import ParsedDocument
from ..system.debug_output import emit_debug
from ..system.error_handling import ErrorHandler, ErrorSeverity, XMLParsingError, create_error_context
from .format_classifier import ParsingPath, classify_content
from .node_parsers.boq_parser import parse_xml_document
from .node_parsers.line_parser import parse_text_document


def parse_gaeb(content: str, file_name: str) -> ParsedDocument:
    """
    Parse decoded GAEB text.

    XML that fails to parse is re-read by the line parser in full; the two
    paths never contribute to the same document. Heuristic misses produce
    fewer or zero positions rather than errors.
    """
    if classify_content(content) is ParsingPath.STRUCTURED:
        result = parse_xml_document(content, file_name)
        if result.success:
            for warning in result.warnings or []:
                emit_debug("boq_parser", f"{file_name}: {warning}")
            return result.data

        # Recorded, never raised: the line parser takes over
        ErrorHandler().handle_error(
            XMLParsingError(
                f"Falling back to line parser for {file_name}: {'; '.join(result.errors or [])}",
                severity=ErrorSeverity.MEDIUM,
                context=create_error_context("parse_gaeb", file_path=file_name),
            )
        )

    return parse_text_document(content, file_name)
