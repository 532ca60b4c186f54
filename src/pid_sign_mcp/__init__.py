"""Codecs for an addressable scrolling LED passenger information display."""

from .errors import (
    PIDError,
    UnsupportedCharacterError,
    InvalidAnimationError,
    DelayOutOfRangeError,
    FrameError,
    TruncatedFrameError,
    UnknownAnimationByteError,
    MalformedReservedByteError,
    FrameMismatchError,
)
from .protocol.charset import encode_text, decode_text
from .protocol.messages import (
    Message,
    PingMessage,
    ResponseMessage,
    KeepAlive,
    Acknowledgement,
    inspect,
    register_message_type,
)
from .models.page import Page, PageAnimate
