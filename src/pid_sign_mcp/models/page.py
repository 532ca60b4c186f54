"""Page model: one animated, timed screen of text.

String form::

    [<animate>][<delay>]^<text>

Byte layout::

    +---------+--------+-------+----------+------------------------------+
    | Animate | Offset | Delay | Reserved |        Encoded text          |
    | 1 byte  | 1 byte | 1 byte|   0x00   | lines joined by 0x0A         |
    +---------+--------+-------+----------+------------------------------+

- Offset: number of leading blank lines (leading ``_`` in the text)
- Delay: quarter-seconds to wait after the animation completes
- Text: ``~`` (right-justify) travels as the two bytes ``\\R``
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from ..errors import (
    DelayOutOfRangeError,
    InvalidAnimationError,
    MalformedReservedByteError,
    TruncatedFrameError,
    UnknownAnimationByteError,
    UnsupportedCharacterError,
)
from ..protocol.charset import (
    REPLACEMENT_CHAR,
    decode_text,
    encode_text,
    is_encodable,
)

logger = logging.getLogger(__name__)

HEADER_SIZE = 4
MAX_BYTE = 0xFF

ATTRS_SEP = "^"
RIGHT_CHAR_DECODED = "~"
RIGHT_CHAR_ENCODED = "\\R"
NEWLINE_CHAR = "_"
NEWLINE_BYTE = 0x0A

STR_RE = re.compile(
    r"^(?:(?P<animate>[A-Za-z]?)(?P<delay>[0-9]*)\^)?(?P<text>.*)$",
    re.DOTALL,
)


class PageAnimate(Enum):
    """Entry animation applied when a page appears.

    Each member carries the letter used in the string form and the
    protocol byte used in the byte form.
    """

    # Appear instantly; delay starts immediately.
    NONE = ("N", 0x00)
    # Scroll up from the bottom and stay; delay starts once fully shown.
    VSCROLL = ("V", 0x1D)
    # Scroll in from the right and out to the left; delay starts once the
    # text is gone, so a delay of 0 is usual.
    HSCROLL = ("H", 0x2F)

    def __init__(self, letter: str, code: int) -> None:
        self.letter = letter
        self.code = code

    def __str__(self) -> str:
        return self.letter

    @classmethod
    def from_letter(cls, letter: str) -> PageAnimate:
        """Look up an animation by its (case-insensitive) letter."""
        if isinstance(letter, str) and letter.upper() in _ANIMATE_BY_LETTER:
            return _ANIMATE_BY_LETTER[letter.upper()]
        raise InvalidAnimationError(letter)

    @classmethod
    def from_byte(cls, value: int) -> PageAnimate:
        """Look up an animation by its protocol byte."""
        if value in _ANIMATE_BY_CODE:
            return _ANIMATE_BY_CODE[value]
        raise UnknownAnimationByteError(value)


_ANIMATE_BY_LETTER = {a.letter: a for a in PageAnimate}
_ANIMATE_BY_CODE = {a.code: a for a in PageAnimate}

DEFAULT_ANIMATE = PageAnimate.NONE
DEFAULT_DELAY = 20

_CONTROL_CHARS = frozenset((RIGHT_CHAR_DECODED, NEWLINE_CHAR))
MAX_DELAY_DIGITS = len(str(MAX_BYTE))


@dataclass(frozen=True)
class Page:
    """A single screen of text for the sign.

    Args:
        animate: Entry animation, as a ``PageAnimate`` or its letter.
        delay: Quarter-seconds (0-255) to hold the page after the animation.
        text: Display text. Use ``~`` to right-justify the rest of the line
            and ``_`` to advance to the next line.

    Raises:
        InvalidAnimationError: if ``animate`` is not a known animation.
        DelayOutOfRangeError: if ``delay`` is not an int within 0-255.
        UnsupportedCharacterError: if ``text`` holds unusable characters.
    """

    animate: PageAnimate
    delay: int
    text: str

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self, allow_replacement: bool = False) -> None:
        if not isinstance(self.animate, PageAnimate):
            object.__setattr__(self, "animate", PageAnimate.from_letter(self.animate))

        if (
            not isinstance(self.delay, int)
            or isinstance(self.delay, bool)
            or not 0 <= self.delay <= MAX_BYTE
        ):
            raise DelayOutOfRangeError(self.delay)

        bad_chars = [
            c
            for c in self.text
            if not (
                is_encodable(c)
                or c in _CONTROL_CHARS
                or (allow_replacement and c == REPLACEMENT_CHAR)
            )
        ]
        if bad_chars:
            raise UnsupportedCharacterError(bad_chars)

    @classmethod
    def _from_decoded(cls, animate: PageAnimate, delay: int, text: str) -> Page:
        """Build a page from decoded device text, which may hold U+FFFD."""
        page = object.__new__(cls)
        object.__setattr__(page, "animate", animate)
        object.__setattr__(page, "delay", delay)
        object.__setattr__(page, "text", text)
        page._validate(allow_replacement=True)
        return page

    # ─── String form ─────────────────────────────────────────────────

    @classmethod
    def from_str(
        cls,
        string: str,
        default_animate: PageAnimate = DEFAULT_ANIMATE,
        default_delay: int = DEFAULT_DELAY,
    ) -> Page:
        """Construct a page from its string form.

        Accepted formats are ``<text>``, ``^<text>``, ``<animate>^<text>``,
        ``<delay>^<text>`` and ``<animate><delay>^<text>``. Missing fields
        take the defaults; an empty delay is treated as missing, not zero.

        >>> Page.from_str("V^12:34").delay
        20
        """
        match = STR_RE.match(string)
        animate = default_animate
        delay = default_delay

        if match.group("animate"):
            animate = PageAnimate.from_letter(match.group("animate"))
        if match.group("delay"):
            digits = match.group("delay")
            # Over three significant digits can never fit a byte
            if len(digits.lstrip("0")) > MAX_DELAY_DIGITS:
                raise DelayOutOfRangeError(digits)
            delay = int(digits)

        return cls(animate, delay, match.group("text"))

    def to_str(self) -> str:
        """Return the string form, always including both attributes.

        >>> Page(PageAnimate.VSCROLL, 40, "12:34 FUNKYTOWN~5_Limited Express").to_str()
        'V40^12:34 FUNKYTOWN~5_Limited Express'
        """
        return f"{self.animate.letter}{self.delay}{ATTRS_SEP}{self.text}"

    def __str__(self) -> str:
        return self.to_str()

    # ─── Byte form ───────────────────────────────────────────────────

    def to_bytes(self) -> bytes:
        """Serialize the page to the display's raw byte layout.

        Raises:
            UnsupportedCharacterError: if the text cannot be encoded,
                e.g. it holds replacement characters from a lossy decode.
        """
        offset = len(self.text) - len(self.text.lstrip(NEWLINE_CHAR))
        # Blank lines past what the offset byte can count stay in the body
        offset = min(offset, MAX_BYTE)

        lines = self.text[offset:].split(NEWLINE_CHAR)
        body = bytes([NEWLINE_BYTE]).join(
            encode_text(line.replace(RIGHT_CHAR_DECODED, RIGHT_CHAR_ENCODED))
            for line in lines
        )

        header = bytes([self.animate.code, offset, self.delay, 0x00])
        return header + body

    @classmethod
    def from_bytes(cls, data: bytes) -> Page:
        """Deserialize a page from the display's raw byte layout.

        Text decoding never fails; unknown display bytes become U+FFFD.
        """
        if len(data) < HEADER_SIZE:
            raise TruncatedFrameError(
                f"Page needs at least {HEADER_SIZE} bytes, got {len(data)}"
            )

        animate = PageAnimate.from_byte(data[0])
        offset = data[1]
        delay = data[2]
        if data[3] != 0x00:
            raise MalformedReservedByteError(3, data[3])

        raw_text = bytes(data[HEADER_SIZE:]).rstrip(bytes([NEWLINE_BYTE]))
        lines = [
            decode_text(line).replace(RIGHT_CHAR_ENCODED, RIGHT_CHAR_DECODED)
            for line in raw_text.split(bytes([NEWLINE_BYTE]))
        ]
        text = NEWLINE_CHAR * offset + NEWLINE_CHAR.join(lines)

        logger.debug("Decoded page %s from %d bytes", animate.name, len(data))
        return cls._from_decoded(animate, delay, text)

    def to_dict(self) -> dict:
        """Convert the page to a JSON-serializable dictionary."""
        return {
            "animate": self.animate.letter,
            "delay": self.delay,
            "text": self.text,
            "string": self.to_str(),
        }
