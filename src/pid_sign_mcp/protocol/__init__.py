"""Protocol layer: display character table and control message framing."""

from .charset import decode_text, encode_text
from .messages import Message, PingMessage, ResponseMessage, inspect
