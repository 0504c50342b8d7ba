# websearch/modules/url_encoding.py
from pydantic import BaseModel, Field

from websearch.errors import EncodingConversionError

# RFC 2396 character classes
RESERVED = b";/?:@&=+$,"
MARK = b"_.!~*'()-"
ALPHANUMERIC = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

# Encodings whose bytes are already valid UTF-8, no transcoding needed.
SAFE_ENCODINGS = ("UTF-8", "utf8", "US-ASCII")


class EncodingOptions(BaseModel):
    preserve_reserved: bool = Field(
        False, description="Leave RFC 2396 reserved punctuation unescaped."
    )
    preserve_mark: bool = Field(
        False, description="Leave RFC 2396 mark punctuation unescaped."
    )
    spaces_as_plus: bool = Field(
        True, description="Encode a literal space as '+' instead of '%20'."
    )


def to_utf8(text, encoding: str = None) -> bytes:
    """
    Returns the UTF-8 byte form of `text`.

    A str is encoded directly. Bytes are decoded from `encoding` first, unless
    the encoding is one of SAFE_ENCODINGS, in which case the bytes must already
    be valid UTF-8.

    Args:
        text (str | bytes): The text to convert.
        encoding (str, optional): Source encoding of `text` when it is bytes.
            Defaults to UTF-8.

    Raises:
        EncodingConversionError: the encoding is unknown or the input cannot be
            represented as UTF-8.
    """
    encoding = encoding or "UTF-8"
    if isinstance(text, str):
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError:
            raise EncodingConversionError(
                encoding,
                "Could not convert string to 'UTF-8': it holds undecodable bytes."
                " Set WEB_SEARCH_ENCODING to the terminal encoding.",
            ) from None

    source = "utf-8" if encoding in SAFE_ENCODINGS else encoding
    try:
        return bytes(text).decode(source).encode("utf-8")
    except (LookupError, UnicodeError):
        raise EncodingConversionError(encoding) from None


def _safe_bytes(options: EncodingOptions) -> frozenset:
    safe = ALPHANUMERIC
    if options.preserve_reserved:
        safe += RESERVED
    if options.preserve_mark:
        safe += MARK
    return frozenset(safe)


def percent_encode(text, options: EncodingOptions = None, encoding: str = None) -> str:
    """
    URL-encodes `text` byte by byte following RFC 2396.

    Letters and digits always pass through. Reserved and mark characters pass
    through only when the matching option is set, a space becomes '+' when
    `spaces_as_plus` is set, and every other byte of the UTF-8 form becomes
    '%XX' with uppercase hex digits.

    Args:
        text (str | bytes): The text to encode.
        options (EncodingOptions, optional): Escaping switches. Defaults to
            escaping reserved and mark characters with spaces as '+'.
        encoding (str, optional): Source encoding when `text` is bytes.
    """
    options = options or EncodingOptions()
    safe = _safe_bytes(options)

    encoded = []
    for byte in to_utf8(text, encoding):
        if byte in safe:
            encoded.append(chr(byte))
        elif byte == 0x20 and options.spaces_as_plus:
            encoded.append("+")
        else:
            encoded.append(f"%{byte:02X}")
    return "".join(encoded)
