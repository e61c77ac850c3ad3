"""
Upload boundary: extension gate, decoding and parsing of one file.
"""

from pathlib import PurePath
from typing import Tuple

from ..metadata.models import ParsedDocument
from ..system.error_handling import FileReadError, UnsupportedFileError, handle_file_read_error
from .encoding import decode_gaeb_bytes
from .pipeline import parse_gaeb

ACCEPTED_EXTENSIONS: Tuple[str, ...] = (".gaeb", ".d83", ".p83", ".x83")


def file_extension(file_name: str) -> str:
    return PurePath(file_name).suffix.lower()


def is_supported_file(file_name: str) -> bool:
    return file_extension(file_name) in ACCEPTED_EXTENSIONS


def validate_file_name(file_name: str) -> None:
    """Raise UnsupportedFileError for anything outside ACCEPTED_EXTENSIONS."""
    if not is_supported_file(file_name):
        extension = file_extension(file_name) or "(none)"
        raise UnsupportedFileError(
            f"Unsupported file type: {extension}. Please use .gaeb, .d83, .p83, or .x83 files.",
            file_name=file_name,
            extension=extension,
        )


def parse_upload(raw_bytes: bytes, file_name: str) -> ParsedDocument:
    """
    Gate, decode and parse one uploaded file.

    Only UnsupportedFileError and FileReadError leave this function.
    """
    validate_file_name(file_name)
    try:
        content, _ = decode_gaeb_bytes(raw_bytes, source_name=file_name)
    except FileReadError:
        raise
    except Exception as exc:
        raise handle_file_read_error(file_name, exc) from exc
    return parse_gaeb(content, file_name)
