"""
GAEB parsing: format classification, XML and line parsers, upload boundary.
"""

from .format_classifier import ParsingPath, classify_content, detect_text_format, detect_xml_format
from .node_parsers.boq_parser import parse_xml_document
from .node_parsers.line_parser import parse_text_document
from .pipeline import parse_gaeb
from .upload import ACCEPTED_EXTENSIONS, is_supported_file, parse_upload, validate_file_name

__all__ = [
    "ParsingPath",
    "classify_content",
    "detect_text_format",
    "detect_xml_format",
    "parse_xml_document",
    "parse_text_document",
    "parse_gaeb",
    "ACCEPTED_EXTENSIONS",
    "is_supported_file",
    "parse_upload",
    "validate_file_name",
]
