"""Detect the text encoding of raw SDEF bytes and decode them."""

import codecs
import re
from dataclasses import dataclass

from charset_normalizer import from_bytes
from loguru import logger

from sdef_core.config import ENCODING_ALIASES, FALLBACK_ENCODINGS, XML_DECLARATION_SNIFF_BYTES
from sdef_core.errors import DecodeError

_ENCODING_DECL_RE = re.compile(r"""encoding\s*=\s*["']([^"']+)["']""")

# Longest marks first: the UTF-32LE mark starts with the UTF-16LE one.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


@dataclass(frozen=True)
class DecodedText:
    """Decoded text plus how the encoding was determined."""

    text: str
    encoding: str
    strategy: str


def _try_decode(data: bytes, encoding: str) -> str | None:
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return None


def _decode_with_bom(data: bytes) -> DecodedText | None:
    # Keep looping after a failed decode: FF FE 00 00 may still be UTF-16LE.
    for bom, encoding in _BOMS:
        if not data.startswith(bom):
            continue
        text = _try_decode(data[len(bom) :], encoding)
        if text is not None:
            return DecodedText(text=text, encoding=encoding, strategy="bom")
    return None


def codec_for_charset(name: str) -> str | None:
    """Map an IANA charset name from an XML declaration to a Python codec name.

    Returns None when neither the alias table nor the codec registry knows it.
    """
    lower = name.strip().lower()
    if lower in ENCODING_ALIASES:
        return ENCODING_ALIASES[lower]
    try:
        return codecs.lookup(lower).name
    except LookupError:
        return None


def declared_encoding(data: bytes) -> str | None:
    """Return the charset named in the XML declaration, if any."""
    head = data[:XML_DECLARATION_SNIFF_BYTES]
    try:
        header = head.decode("ascii")
    except UnicodeDecodeError:
        header = head.decode("utf-8", errors="ignore")
    match = _ENCODING_DECL_RE.search(header)
    return match.group(1) if match else None


def _decode_with_declaration(data: bytes) -> DecodedText | None:
    charset = declared_encoding(data)
    if charset is None:
        return None
    encoding = codec_for_charset(charset)
    if encoding is None:
        logger.debug("Unknown declared encoding {!r}", charset)
        return None
    text = _try_decode(data, encoding)
    if text is None:
        logger.debug("Declared encoding {!r} does not decode the input", charset)
        return None
    return DecodedText(text=text, encoding=encoding, strategy="declaration")


def _decode_with_detection(data: bytes) -> DecodedText | None:
    best = from_bytes(data).best()
    if best is None:
        return None
    return DecodedText(text=str(best), encoding=best.encoding, strategy="detected")


def _decode_with_fallbacks(data: bytes) -> DecodedText | None:
    for encoding in FALLBACK_ENCODINGS:
        text = _try_decode(data, encoding)
        if text is not None:
            return DecodedText(text=text, encoding=encoding, strategy="fallback")
    return None


def resolve(data: bytes) -> DecodedText:
    """Decode raw bytes, trying BOM, XML declaration, detection, then fallbacks.

    The first strategy that produces text wins.

    Raises:
        DecodeError: No strategy could decode the input.
    """
    for strategy in (
        _decode_with_bom,
        _decode_with_declaration,
        _decode_with_detection,
        _decode_with_fallbacks,
    ):
        decoded = strategy(data)
        if decoded is not None:
            logger.debug(
                "Decoded {} bytes as {} (strategy: {})",
                len(data),
                decoded.encoding,
                decoded.strategy,
            )
            return decoded
    msg = f"Cannot decode {len(data)} bytes with any known encoding"
    raise DecodeError(msg)


def decode(data: bytes) -> str:
    """Decode raw bytes to text. See resolve()."""
    return resolve(data).text
