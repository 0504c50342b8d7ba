import os
import sys
from urllib.parse import unquote_to_bytes

import pytest

from websearch.errors import EncodingConversionError
from websearch.modules.url_encoding import (
    EncodingOptions,
    percent_encode,
    to_utf8,
)


def test_alphanumeric_passes_through():
    text = "abcXYZ0123456789"
    assert percent_encode(text) == text


def test_empty_input():
    assert percent_encode("") == ""
    assert percent_encode(b"") == ""


def test_spaces_become_plus_by_default():
    assert percent_encode("hello world") == "hello+world"


def test_spaces_escaped_when_plus_disabled():
    options = EncodingOptions(spaces_as_plus=False)
    assert percent_encode("hello world", options) == "hello%20world"


def test_reserved_escaped_by_default():
    assert percent_encode(";/?:@&=+$,") == "%3B%2F%3F%3A%40%26%3D%2B%24%2C"


def test_reserved_preserved_on_request():
    options = EncodingOptions(preserve_reserved=True)
    assert percent_encode(";/?:@&=+$,", options) == ";/?:@&=+$,"


def test_mark_escaped_by_default():
    assert percent_encode("_.!~*'()-") == "%5F%2E%21%7E%2A%27%28%29%2D"


def test_mark_preserved_on_request():
    options = EncodingOptions(preserve_mark=True)
    assert percent_encode("_.!~*'()-", options) == "_.!~*'()-"


def test_non_ascii_is_escaped_per_utf8_byte():
    assert percent_encode("café") == "caf%C3%A9"
    assert percent_encode("€") == "%E2%82%AC"


def test_control_bytes_always_escaped():
    options = EncodingOptions(preserve_reserved=True, preserve_mark=True)
    assert percent_encode("\x00\x1f\x7f", options) == "%00%1F%7F"


def test_every_ascii_byte_classified():
    for value in range(128):
        char = chr(value)
        encoded = percent_encode(char)
        if char.isascii() and char.isalnum():
            assert encoded == char
        elif char == " ":
            assert encoded == "+"
        else:
            assert encoded == f"%{value:02X}"


def test_output_only_contains_safe_characters():
    encoded = percent_encode("tab\there\nnew line ünïcødé 日本語 <>\"#%{}|\\^[]`")
    assert all(c.isascii() and (c.isalnum() or c in "+%") for c in encoded)


@pytest.mark.parametrize(
    "text",
    ["hello world", "c++ & rust?", "naïve café", "日本語 テスト", "100% sure;/?"],
)
def test_decoding_recovers_utf8_bytes(text):
    encoded = percent_encode(text)
    assert unquote_to_bytes(encoded.replace("+", "%20")) == text.encode("utf-8")

    options = EncodingOptions(spaces_as_plus=False, preserve_mark=True)
    assert unquote_to_bytes(percent_encode(text, options)) == text.encode("utf-8")


def test_encoding_is_deterministic():
    options = EncodingOptions(preserve_reserved=True)
    assert percent_encode("a b/c ü", options) == percent_encode("a b/c ü", options)


def test_transcodes_from_declared_encoding():
    assert to_utf8(b"caf\xe9", "ISO-8859-1") == "café".encode("utf-8")
    assert percent_encode(b"caf\xe9", encoding="ISO-8859-1") == "caf%C3%A9"


def test_safe_encodings_are_not_transcoded():
    assert to_utf8("café".encode("utf-8"), "utf8") == "café".encode("utf-8")
    assert to_utf8(b"plain", "US-ASCII") == b"plain"


def test_unknown_encoding_fails():
    with pytest.raises(EncodingConversionError) as excinfo:
        percent_encode(b"abc", encoding="NO-SUCH-ENCODING")
    assert "NO-SUCH-ENCODING" in str(excinfo.value)


def test_invalid_byte_sequence_fails():
    with pytest.raises(EncodingConversionError):
        to_utf8(b"\xff\xfe", "UTF-8")


def test_lone_surrogate_fails():
    with pytest.raises(EncodingConversionError) as excinfo:
        percent_encode("bad\udce9")
    assert "WEB_SEARCH_ENCODING" in str(excinfo.value)
    assert "from 'UTF-8' to 'UTF-8'" not in str(excinfo.value)


@pytest.mark.skipif(
    sys.platform == "win32" or sys.getfilesystemencoding().lower() != "utf-8",
    reason="needs surrogateescape argv decoding",
)
def test_undecodable_argv_bytes_recovered_with_fsencode():
    word = os.fsdecode(b"caf\xe9")
    assert percent_encode(os.fsencode(word), encoding="latin-1") == "caf%C3%A9"
