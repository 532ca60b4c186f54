"""MCP server entry point for the PID sign codecs.

Exposes page and message encoding as tools, resources, and prompts via the
Model Context Protocol using the official Python MCP SDK with stdio
transport. No device connection is made; byte sequences are returned as hex
for whatever transport sends them.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import PIDError
from .models.page import DEFAULT_DELAY, Page, PageAnimate
from .protocol import charset
from .protocol.messages import (
    DEFAULT_ADDRESS,
    MESSAGE_TYPES,
    PING_FILLER,
    PingMessage,
    inspect,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "pid-sign",
    instructions="Encode and decode pages and control messages for a scrolling LED sign",
)


def _parse_hex(data_hex: str) -> bytes:
    """Parse hex such as ``"1d 01 23 00"`` (whitespace ignored)."""
    return bytes.fromhex("".join(data_hex.split()))


# ─── PAGE TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def encode_page(
    page: str,
    default_animate: str = "N",
    default_delay: int = DEFAULT_DELAY,
) -> dict[str, Any]:
    """Convert a page string into display bytes.

    Args:
        page: Page in ``[animate][delay]^text`` form, e.g. ``V40^12:34~5_Express``.
        default_animate: Animation letter (N, V, H) used if the string has none.
        default_delay: Delay (0-255 quarter-seconds) used if the string has none.
    """
    try:
        parsed = Page.from_str(
            page, PageAnimate.from_letter(default_animate), default_delay
        )
        data = parsed.to_bytes()
    except PIDError as e:
        return {"error": str(e)}

    result = parsed.to_dict()
    result["bytes"] = data.hex(" ")
    result["length"] = len(data)
    return result


@mcp.tool()
def decode_page(data_hex: str) -> dict[str, Any]:
    """Convert display bytes (hex) back into a page.

    Args:
        data_hex: Raw page bytes as hex, header included.
    """
    try:
        page = Page.from_bytes(_parse_hex(data_hex))
    except ValueError as e:
        return {"error": str(e)}
    return page.to_dict()


@mcp.tool()
def encode_text(text: str) -> dict[str, Any]:
    """Encode a single line of display text without page attributes."""
    try:
        data = charset.encode_text(text)
    except PIDError as e:
        return {"error": str(e)}
    return {"bytes": data.hex(" "), "length": len(data)}


@mcp.tool()
def decode_text(data_hex: str) -> dict[str, Any]:
    """Decode display text bytes (hex); unknown bytes become U+FFFD."""
    try:
        data = _parse_hex(data_hex)
    except ValueError as e:
        return {"error": str(e)}
    return {"text": charset.decode_text(data)}


# ─── MESSAGE TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def build_ping(
    address: int = DEFAULT_ADDRESS,
    unspecified_byte: int = PING_FILLER,
) -> dict[str, Any]:
    """Build a keep-alive ping message for a display address.

    Args:
        address: Display address (0-255, default 1).
        unspecified_byte: Trailing byte (0-255, default 0x6F).
    """
    if not 0 <= address <= 255 or not 0 <= unspecified_byte <= 255:
        return {"error": "Address and unspecified_byte must be 0-255"}
    message = PingMessage(unspecified_byte=unspecified_byte, address=address)
    return {"type": "PingMessage", "bytes": message.to_bytes().hex(" ")}


@mcp.tool()
def inspect_message(data_hex: str, address: int = DEFAULT_ADDRESS) -> dict[str, Any]:
    """Identify and validate a control message received from a display.

    Args:
        data_hex: Raw message bytes as hex, without CRC or packet framing.
        address: Display address the bytes were read from.
    """
    if not 0 <= address <= 255:
        return {"error": "Address must be 0-255"}
    try:
        message = inspect(_parse_hex(data_hex), address)
    except ValueError as e:
        return {"error": str(e)}

    return {
        "type": type(message).__name__,
        "address": message.address,
        "unspecified_byte": message.unspecified_byte,
        "bytes": message.to_bytes().hex(" "),
    }


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("pid://catalog/characters")
def resource_character_catalog() -> str:
    """Characters usable in page text with their display bytes."""
    chars = [
        {"char": c, "byte": f"0x{b:02X}"} for c, b in charset.TEXT_ENCODING.items()
    ]
    return json.dumps({
        "characters": chars,
        "count": len(chars),
        "controls": {"~": "right-justify rest of line", "_": "next line"},
    })


@mcp.resource("pid://catalog/animations")
def resource_animation_catalog() -> str:
    """Page entry animations with their letters and protocol bytes."""
    animations = [
        {"name": a.name, "letter": a.letter, "byte": f"0x{a.code:02X}"}
        for a in PageAnimate
    ]
    return json.dumps({"animations": animations})


@mcp.resource("pid://catalog/messages")
def resource_message_catalog() -> str:
    """Registered control message types and their markers."""
    messages = [
        {
            "type": m.__name__,
            "marker": m.marker(DEFAULT_ADDRESS).hex(" "),
            "length": m.SIZE,
        }
        for m in MESSAGE_TYPES
    ]
    return json.dumps({"messages": messages, "address": DEFAULT_ADDRESS})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def compose_page(content: str) -> str:
    """Help write page strings for a piece of content."""
    return f"""Write one or more page strings to show: {content}

Each page is [animate][delay]^text where:
- animate is N (instant), V (scroll up) or H (scroll across; use delay 0)
- delay is 0-255 quarter-seconds to hold the page
- ~ right-justifies the rest of the line, _ starts the next line
- the characters " % @ [ ] ^ ` {{ | }} cannot be displayed

Check each page with encode_page before sending."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting PID sign MCP server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
