# nodian/core/codecs.py
import base64
import binascii
import html
import re
from enum import Enum
from urllib.parse import quote_plus, unquote_plus

from loguru import logger

from .errors import DecodeError


class Encoding(str, Enum):
    """Text encodings offered by the encode/decode tool."""
    BASE32 = "Base32"
    BASE64 = "Base64"
    HTML = "HTML"
    URL = "URL"

    @classmethod
    def from_name(cls, name: str) -> "Encoding":
        wanted = name.strip().lower()
        for encoding in cls:
            if encoding.value.lower() == wanted:
                return encoding
        raise ValueError(f"Unsupported encoding: {name}")


DEFAULT_ENCODING = Encoding.BASE64

# '%' not followed by two hex digits
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _coerce(mode: Encoding | str) -> Encoding:
    return mode if isinstance(mode, Encoding) else Encoding.from_name(mode)


def encode(mode: Encoding | str, text: str) -> str:
    """Encodes `text` with the selected codec."""
    mode = _coerce(mode)
    if mode is Encoding.BASE32:
        return base64.b32encode(text.encode("utf-8")).decode("ascii")
    if mode is Encoding.BASE64:
        return base64.b64encode(text.encode("utf-8")).decode("ascii")
    if mode is Encoding.HTML:
        return html.escape(text, quote=True)
    return quote_plus(text, encoding="utf-8")


def decode(mode: Encoding | str, text: str) -> str:
    """
    Decodes `text` with the selected codec.
    Raises DecodeError for malformed input or a payload that is not UTF-8.
    """
    mode = _coerce(mode)
    if mode is Encoding.HTML:
        return html.unescape(text)

    if mode is Encoding.URL:
        if _BAD_PERCENT_ESCAPE.search(text):
            logger.debug("Rejecting URL input with malformed percent escape.")
            raise DecodeError("Invalid URL-encoded input")
        try:
            return unquote_plus(text, encoding="utf-8", errors="strict")
        except UnicodeDecodeError as e:
            raise DecodeError("Invalid URL-encoded input") from e

    try:
        if mode is Encoding.BASE32:
            raw = base64.b32decode(text)
        else:
            raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug(f"{mode.value} decode failed: {e}")
        raise DecodeError(f"Invalid {mode.value} input") from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid {mode.value} input: decoded bytes are not UTF-8 text") from e
