"""Exception hierarchy for the PID sign codecs.

Every error derives from :class:`PIDError`, which is itself a
``ValueError`` so callers treating malformed input as a value error keep
working::

    PIDError
    ├── UnsupportedCharacterError - text has characters the sign cannot show
    ├── InvalidAnimationError     - unknown animation letter/value
    ├── DelayOutOfRangeError      - delay outside 0-255
    └── FrameError                - raw byte structure problems
        ├── TruncatedFrameError
        ├── UnknownAnimationByteError
        ├── MalformedReservedByteError
        └── FrameMismatchError
"""

from __future__ import annotations

from typing import Iterable


class PIDError(ValueError):
    """Base exception for all codec errors."""


class UnsupportedCharacterError(PIDError):
    """One or more characters have no display byte.

    ``characters`` holds every offending character, in order of first
    appearance.
    """

    def __init__(self, characters: Iterable[str]) -> None:
        self.characters = tuple(dict.fromkeys(characters))
        listing = ", ".join(repr(c) for c in self.characters)
        super().__init__(f"{listing} not in allowed characters")


class InvalidAnimationError(PIDError):
    """The animation letter or value does not name a known animation."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown page animation {value!r}")


class DelayOutOfRangeError(PIDError):
    """Page delay must fit a single byte."""

    def __init__(self, delay: object) -> None:
        self.delay = delay
        super().__init__(f"Page delay must be 0-255, got {delay!r}")


class FrameError(PIDError):
    """Base class for errors raised while parsing raw bytes."""


class TruncatedFrameError(FrameError):
    """Fewer bytes than the structure requires."""


class UnknownAnimationByteError(FrameError):
    """First byte of a page is not an animation code."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"Unexpected animate byte value 0x{value:02X} at index 0")


class MalformedReservedByteError(FrameError):
    """A byte that must be 0x00 is not."""

    def __init__(self, index: int, value: int) -> None:
        self.index = index
        self.value = value
        super().__init__(f"Unexpected byte value 0x{value:02X} at index {index}")


class FrameMismatchError(FrameError):
    """Marker bytes or total length do not match the message type."""
