"""
Utilities for converting vocabulary pieces to displayable strings.
"""

import unicodedata

from .types import Piece


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_piece(piece: Piece) -> str:
    """
    Render a str or bytes piece with control characters escaped.

    Bytes that do not form valid UTF-8 are shown as the replacement character.
    """
    if isinstance(piece, bytes):
        piece = piece.decode("utf-8", errors="replace")
    return _escape_ctrl_chars(piece)
