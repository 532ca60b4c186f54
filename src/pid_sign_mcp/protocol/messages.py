"""Small fixed-length control messages exchanged with a display.

Each message type is identified by a two-byte marker::

    +---------+------+------------------+
    | Address | Type |     Payload      |
    | 1 byte  | 1 B  |  fixed length    |
    +---------+------+------------------+

Byte sequences here exclude the CRC and packet framing needed on the wire.
Message types are registered in ``MESSAGE_TYPES`` so :func:`inspect` can
pick the right one for an incoming byte sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from ..errors import FrameMismatchError, MalformedReservedByteError

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = 0x01
PING_FILLER = 0x6F

MESSAGE_TYPES: list[type[Message]] = []


def register_message_type(cls: type[Message]) -> type[Message]:
    """Class decorator adding a message type to the :func:`inspect` registry."""
    if cls not in MESSAGE_TYPES:
        MESSAGE_TYPES.append(cls)
    return cls


@dataclass(frozen=True)
class Message:
    """Base class for messages identified by an address + type marker."""

    TYPE_CODE: ClassVar[int] = 0
    SIZE: ClassVar[int] = 2

    @classmethod
    def marker(cls, address: int) -> bytes:
        """The bytes a raw message of this type must start with."""
        return bytes([address, cls.TYPE_CODE])

    @classmethod
    def from_bytes(cls, data: bytes, address: int = DEFAULT_ADDRESS):
        """Parse raw bytes read from ``address``; overridden by each message type."""
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        """Raw bytes without CRC or packet framing; overridden by each message type."""
        raise NotImplementedError

    @classmethod
    def _check_frame(cls, data: bytes, address: int) -> bytes:
        data = bytes(data)
        if len(data) < cls.SIZE:
            raise FrameMismatchError(
                f"Unexpected end of data for {cls.__name__}: "
                f"need {cls.SIZE} bytes, got {len(data)}"
            )
        if len(data) > cls.SIZE:
            raise FrameMismatchError(
                f"Unexpected data for {cls.__name__}: "
                f"need {cls.SIZE} bytes, got {len(data)}"
            )
        if data[:2] != cls.marker(address):
            raise FrameMismatchError(
                f"Incorrect header for {cls.__name__}: {data[:2].hex(' ')}"
            )
        return data


@register_message_type
@dataclass(frozen=True)
class PingMessage(Message):
    """Keep-alive sent to stop the display clearing itself.

    The display blanks after about a minute without traffic; a ping has no
    visual effect but resets that timer.

    Args:
        unspecified_byte: Seems to have no effect; ``0x6F`` in deployment.
        address: Device address the message is for.
    """

    TYPE_CODE: ClassVar[int] = 0x50
    SIZE: ClassVar[int] = 3

    unspecified_byte: int = PING_FILLER
    address: int = DEFAULT_ADDRESS

    @classmethod
    def from_bytes(cls, data: bytes, address: int = DEFAULT_ADDRESS) -> PingMessage:
        data = cls._check_frame(data, address)
        return cls(unspecified_byte=data[2], address=address)

    def to_bytes(self) -> bytes:
        return self.marker(self.address) + bytes([self.unspecified_byte])


@register_message_type
@dataclass(frozen=True)
class ResponseMessage(Message):
    """Acknowledgement received from the display after a transmission.

    Args:
        unspecified_byte: Varies; often tracks the last ping's byte, but not
            reliably, so it is kept but otherwise ignored.
        address: Device address the message came from.
    """

    TYPE_CODE: ClassVar[int] = 0x52
    SIZE: ClassVar[int] = 4

    unspecified_byte: int
    address: int = DEFAULT_ADDRESS

    @classmethod
    def from_bytes(
        cls, data: bytes, address: int = DEFAULT_ADDRESS
    ) -> ResponseMessage:
        data = cls._check_frame(data, address)
        if data[3] != 0x00:
            raise MalformedReservedByteError(3, data[3])
        return cls(unspecified_byte=data[2], address=address)

    def to_bytes(self) -> bytes:
        return self.marker(self.address) + bytes([self.unspecified_byte, 0x00])


# Aliases matching the link-level names
KeepAlive = PingMessage
Acknowledgement = ResponseMessage


def inspect(data: bytes, address: int = DEFAULT_ADDRESS) -> Message:
    """Parse raw bytes into whichever registered message type they match.

    Types are tried in registration order; the first whose marker starts
    ``data`` is used, and its own validation errors propagate.

    Raises:
        FrameMismatchError: if no registered marker matches.
    """
    data = bytes(data)
    for message_type in MESSAGE_TYPES:
        if data.startswith(message_type.marker(address)):
            logger.debug("Matched %s for %s", message_type.__name__, data.hex(" "))
            return message_type.from_bytes(data, address)
    raise FrameMismatchError(
        f"No message type matches {data[:2].hex(' ') or '(empty)'} "
        f"for address 0x{address:02X}"
    )
