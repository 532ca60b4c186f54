"""Tests for the page model: string grammar and byte layout."""

import pytest

from pid_sign_mcp.errors import (
    DelayOutOfRangeError,
    InvalidAnimationError,
    MalformedReservedByteError,
    TruncatedFrameError,
    UnknownAnimationByteError,
    UnsupportedCharacterError,
)
from pid_sign_mcp.models.page import DEFAULT_DELAY, Page, PageAnimate


def test_animate_values():
    """Each animation should carry its letter and protocol byte."""
    assert (PageAnimate.NONE.letter, PageAnimate.NONE.code) == ("N", 0x00)
    assert (PageAnimate.VSCROLL.letter, PageAnimate.VSCROLL.code) == ("V", 0x1D)
    assert (PageAnimate.HSCROLL.letter, PageAnimate.HSCROLL.code) == ("H", 0x2F)
    assert str(PageAnimate.VSCROLL) == "V"


def test_animate_lookups():
    """Animations should be found by letter (any case) or by byte."""
    assert PageAnimate.from_letter("h") is PageAnimate.HSCROLL
    assert PageAnimate.from_letter("V") is PageAnimate.VSCROLL
    assert PageAnimate.from_byte(0x2F) is PageAnimate.HSCROLL


def test_animate_unknown_letter():
    """Unknown letters should raise InvalidAnimationError."""
    with pytest.raises(InvalidAnimationError):
        PageAnimate.from_letter("X")
    with pytest.raises(InvalidAnimationError):
        PageAnimate.from_letter(3)


def test_animate_unknown_byte():
    """Unknown protocol bytes should raise UnknownAnimationByteError."""
    with pytest.raises(UnknownAnimationByteError):
        PageAnimate.from_byte(0x01)


def test_from_str_all_fields():
    """Animation, delay and text should all be parsed."""
    page = Page.from_str("H40^hello")
    assert page.animate is PageAnimate.HSCROLL
    assert page.delay == 40
    assert page.text == "hello"


def test_from_str_no_caret_uses_defaults():
    """Without a caret the whole string is text."""
    page = Page.from_str("hello")
    assert page.animate is PageAnimate.NONE
    assert page.delay == DEFAULT_DELAY
    assert page.text == "hello"


def test_from_str_empty_delay_uses_default():
    """An empty delay should fall back to the default, not zero."""
    page = Page.from_str("V^hello")
    assert page.animate is PageAnimate.VSCROLL
    assert page.delay == 20
    assert page.text == "hello"


def test_from_str_delay_only():
    """A delay without an animation should keep the default animation."""
    page = Page.from_str("40^test")
    assert page.animate is PageAnimate.NONE
    assert page.delay == 40


def test_from_str_explicit_zero_delay():
    """An explicit zero delay should be kept."""
    assert Page.from_str("H0^x").delay == 0


def test_from_str_caller_defaults():
    """Caller-supplied defaults should apply to missing fields."""
    page = Page.from_str("^hi", PageAnimate.HSCROLL, 7)
    assert page.animate is PageAnimate.HSCROLL
    assert page.delay == 7
    assert Page.from_str("hi", default_delay=0).delay == 0


def test_from_str_lowercase_letter():
    """Animation letters should be case-insensitive."""
    assert Page.from_str("v5^a").animate is PageAnimate.VSCROLL


def test_from_str_unknown_letter():
    """Unknown animation letters should raise."""
    with pytest.raises(InvalidAnimationError):
        Page.from_str("Q10^hello")


def test_from_str_delay_out_of_range():
    """Delays beyond one byte should raise at construction."""
    with pytest.raises(DelayOutOfRangeError):
        Page.from_str("N256^hello")


def test_from_str_bad_prefix_is_text():
    """A caret after a non-prefix should leave the whole input as text."""
    with pytest.raises(UnsupportedCharacterError):
        Page.from_str("hello^world")


def test_to_str():
    """String form should always include both attributes."""
    page = Page(PageAnimate.VSCROLL, 40, "12:34 FUNKYTOWN~5_Limited Express")
    assert page.to_str() == "V40^12:34 FUNKYTOWN~5_Limited Express"
    assert str(page) == page.to_str()
    assert str(Page.from_str("hello")) == "N20^hello"


def test_page_accepts_letter():
    """A letter should be accepted in place of a PageAnimate."""
    assert Page("h", 0, "x").animate is PageAnimate.HSCROLL


def test_page_validation():
    """Invalid constructor arguments should raise the matching errors."""
    with pytest.raises(DelayOutOfRangeError):
        Page(PageAnimate.NONE, -1, "x")
    with pytest.raises(DelayOutOfRangeError):
        Page(PageAnimate.NONE, "20", "x")
    with pytest.raises(InvalidAnimationError):
        Page(None, 20, "x")
    with pytest.raises(UnsupportedCharacterError) as excinfo:
        Page(PageAnimate.NONE, 20, "100% {ok}")
    assert excinfo.value.characters == ("%", "{", "}")


def test_page_is_immutable_value():
    """Pages should compare structurally and refuse mutation."""
    a = Page(PageAnimate.VSCROLL, 10, "abc")
    assert a == Page.from_str("V10^abc")
    assert hash(a) == hash(Page.from_str("V10^abc"))
    with pytest.raises(AttributeError):
        a.delay = 5


def test_to_bytes_example():
    """Leading line markers should become the offset byte."""
    expected = bytes([
        0x1D,  # animate byte
        0x01,  # offset byte
        35,  # delay byte
        0x00,
        0x48, 0x65, 0x6C, 0x6C, 0x6F, 0x20, 0x57, 0x6F, 0x72, 0x6C, 0x64,
    ])
    assert Page.from_str("V35^_Hello World").to_bytes() == expected


def test_to_bytes_lines_and_justify():
    """Lines should be joined by 0x0A and ~ escaped as \\R."""
    data = Page.from_str("N0^A~B_C").to_bytes()
    assert data == bytes([0x00, 0x00, 0x00, 0x00, 0x41, 0x5C, 0x52, 0x42, 0x0A, 0x43])


def test_to_bytes_every_justify_marker():
    """Every ~ in a line should be escaped, not just the first."""
    body = Page.from_str("N0^a~b~c").to_bytes()[4:]
    assert body == b"a\\Rb\\Rc"


def test_to_bytes_empty_text():
    """An empty page should be just the header."""
    assert Page(PageAnimate.HSCROLL, 0, "").to_bytes() == bytes([0x2F, 0, 0, 0])


def test_to_bytes_offset_cap():
    """Blank lines past 255 should stay in the body."""
    page = Page(PageAnimate.NONE, 0, "_" * 257 + "x")
    data = page.to_bytes()
    assert data[1] == 255
    assert data[4:] == b"\n\nx"
    assert Page.from_bytes(data) == page


def test_to_bytes_unencodable_text():
    """Replacement characters should not be encodable."""
    page = Page.from_bytes(bytes([0x00, 0x00, 0x14, 0x00, 0x01]))
    with pytest.raises(UnsupportedCharacterError):
        page.to_bytes()


def test_from_bytes():
    """Header fields and text lines should be restored."""
    data = bytes([0x1D, 0x02, 35, 0x00]) + b"12:34\\R5\nLtd\n\n"
    page = Page.from_bytes(data)
    assert page.animate is PageAnimate.VSCROLL
    assert page.delay == 35
    assert page.text == "__12:34~5_Ltd"


def test_from_bytes_accepts_int_list():
    """Any sequence of ints should be accepted."""
    page = Page.from_bytes([0x2F, 0, 0, 0, 0x41])
    assert page == Page(PageAnimate.HSCROLL, 0, "A")


def test_from_bytes_aliases_and_unknown():
    """Decoding should tolerate alias and unknown bytes."""
    page = Page.from_bytes(bytes([0x00, 0x00, 0x14, 0x00, 0x98, 0xA5, 0x01]))
    assert page.text == "─▔\ufffd"


def test_from_bytes_truncated():
    """Fewer than four bytes should raise TruncatedFrameError."""
    with pytest.raises(TruncatedFrameError):
        Page.from_bytes(b"\x1d\x00\x14")


def test_from_bytes_unknown_animation():
    """An unknown first byte should raise UnknownAnimationByteError."""
    with pytest.raises(UnknownAnimationByteError) as excinfo:
        Page.from_bytes(bytes([0x42, 0x00, 0x14, 0x00]))
    assert excinfo.value.value == 0x42


def test_from_bytes_reserved_byte():
    """A non-zero fourth byte should raise MalformedReservedByteError."""
    with pytest.raises(MalformedReservedByteError) as excinfo:
        Page.from_bytes(bytes([0x00, 0x00, 0x14, 0x01]))
    assert excinfo.value.index == 3


def test_bytes_roundtrip():
    """Valid pages should survive to_bytes then from_bytes."""
    for string in (
        "V40^12:34 FUNKYTOWN~5_Limited Express",
        "H0^___•━─█▔·",
        "N255^a__b",
        "N1^",
    ):
        page = Page.from_str(string)
        assert Page.from_bytes(page.to_bytes()) == page


def test_to_dict():
    """to_dict should produce a JSON-serializable structure."""
    d = Page.from_str("V40^hi").to_dict()
    assert d == {"animate": "V", "delay": 40, "text": "hi", "string": "V40^hi"}


def test_from_str_huge_delay():
    """Very long digit runs should raise DelayOutOfRangeError."""
    with pytest.raises(DelayOutOfRangeError):
        Page.from_str("N" + "9" * 5000 + "^x")
    with pytest.raises(DelayOutOfRangeError):
        Page.from_str("N1000^x")


def test_from_str_leading_zero_delay():
    """Leading zeros should not count against the delay range."""
    assert Page.from_str("N000000255^x").delay == 255


def test_page_rejects_replacement_char():
    """Directly built pages should not accept U+FFFD."""
    with pytest.raises(UnsupportedCharacterError):
        Page(PageAnimate.NONE, 20, "a\ufffd")


def test_from_bytes_validates_header_fields():
    """Decoded pages should still be equal to directly built ones."""
    page = Page.from_bytes(bytes([0x2F, 0x00, 0x05, 0x00]) + b"ok")
    assert page == Page(PageAnimate.HSCROLL, 5, "ok")
    assert hash(page) == hash(Page(PageAnimate.HSCROLL, 5, "ok"))
