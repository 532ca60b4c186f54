"""Character table for display text.

Most printable ASCII maps to itself. A handful of ASCII characters are
unusable (``"`` decodes ambiguously, others are unsupported or reserved
for the page grammar), and six Unicode glyphs map to high display bytes.

Decoding is deliberately lossy: some display bytes share a glyph with a
canonical byte (``0x98`` with ``0x97``, ``0xA4``/``0xA5`` with ``0xA3``),
and bytes outside the table decode to U+FFFD. Round-tripping
byte -> char -> byte therefore only holds for canonical bytes.
"""

from __future__ import annotations

import logging

from ..errors import UnsupportedCharacterError

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "\ufffd"

_ASCII_CHARS = (
    " !#$&'()*+,-./0123456789:;<=>?"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ\\"
    "abcdefghijklmnopqrstuvwxyz"
)

TEXT_ENCODING: dict[str, int] = {c: ord(c) for c in _ASCII_CHARS}
TEXT_ENCODING.update({
    "·": 0x8F,  # MIDDLE DOT
    "•": 0xD3,  # BULLET
    "─": 0x97,  # BOX DRAWINGS LIGHT HORIZONTAL
    "━": 0xD2,  # BOX DRAWINGS HEAVY HORIZONTAL
    "█": 0x5F,  # FULL BLOCK
    "▔": 0xA3,  # UPPER ONE EIGHTH BLOCK
})

# Decode-only aliases, never used as encode targets
TEXT_DECODING: dict[int, str] = {b: c for c, b in TEXT_ENCODING.items()}
TEXT_DECODING.update({
    0x98: "─",
    0xA4: "▔",
    0xA5: "▔",
})


def is_encodable(char: str) -> bool:
    """Return True if ``char`` has a display byte."""
    return char in TEXT_ENCODING


def encode_text(text: str) -> bytes:
    """Convert display text into display bytes.

    Raises:
        UnsupportedCharacterError: listing every character in ``text``
            that has no display byte.
    """
    bad_chars = [c for c in text if c not in TEXT_ENCODING]
    if bad_chars:
        raise UnsupportedCharacterError(bad_chars)
    return bytes(TEXT_ENCODING[c] for c in text)


def decode_text(data: bytes) -> str:
    """Convert display bytes into text, substituting U+FFFD for unknown bytes."""
    chars = []
    for byte in data:
        char = TEXT_DECODING.get(byte)
        if char is None:
            logger.debug("No character for display byte 0x%02X", byte)
            char = REPLACEMENT_CHAR
        chars.append(char)
    return "".join(chars)
