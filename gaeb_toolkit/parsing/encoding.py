"""
GAEB encoding utilities.

Provides robust decoding that prefers the XML declaration, then UTF-8, then
chardet guesses with Windows-1252/latin-1 fallbacks, so umlauts and the
m²/m³ unit symbols survive in older text dialects.
"""

from __future__ import annotations
import re
from typing import Optional, Tuple

import chardet

from ..system.error_handling import FileReadError

DECLARED_ENCODING_RE = re.compile(rb'<\?xml[^>]*encoding=["\']([^"\']+)["\']', re.IGNORECASE)


def _declared_encoding(data: bytes) -> Optional[str]:
    match = DECLARED_ENCODING_RE.search(data[:400])
    if match:
        return match.group(1).decode("ascii", errors="ignore") or None
    return None


def decode_gaeb_bytes(raw_bytes: bytes, source_name: Optional[str] = None) -> Tuple[str, str]:
    """
    Decode raw GAEB bytes using a priority order:
    1) Declared encoding in the XML prolog (if present)
    2) UTF-8 (a leading BOM is dropped)
    3) chardet guess
    4) cp1252, then latin-1
    Returns the decoded text and the encoding used.
    """
    if raw_bytes is None:
        raise FileReadError("No file content received", file_path=source_name)

    declared = _declared_encoding(raw_bytes)
    sample_size = min(10240, len(raw_bytes))
    guessed = chardet.detect(raw_bytes[:sample_size]).get("encoding") or None

    for enc in (declared, "utf-8-sig", guessed, "cp1252", "latin-1"):
        if not enc:
            continue
        try:
            return raw_bytes.decode(enc), enc
        except (UnicodeDecodeError, LookupError):
            continue

    raise FileReadError(f"Could not decode '{source_name or 'file'}' as text", file_path=source_name)
