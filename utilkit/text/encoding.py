"""
Character-encoding conversion.

Legacy systems (Windows exports, older Chinese-language APIs) often deliver
GBK bytes. These helpers decode from one encoding and re-encode into another,
replacing characters that cannot be represented instead of failing.
"""

import codecs
import logging

logger = logging.getLogger(__name__)


def convert_encoding(data: bytes, from_encoding: str, to_encoding: str) -> bytes:
    """
    Re-encode bytes from one character encoding to another.

    Args:
        data: Raw bytes in from_encoding.
        from_encoding: Source encoding name, e.g. "GBK".
        to_encoding: Target encoding name, e.g. "UTF-8".

    Returns:
        Bytes in to_encoding. Undecodable input bytes become U+FFFD and
        characters the target cannot represent become "?".

    Raises:
        LookupError: If either encoding name is unknown.
    """
    # Fail on unknown names before touching the data
    codecs.lookup(from_encoding)
    codecs.lookup(to_encoding)

    text = data.decode(from_encoding, errors="replace")
    if "\ufffd" in text:
        logger.debug("Replaced undecodable %s bytes while converting to %s", from_encoding, to_encoding)
    return text.encode(to_encoding, errors="replace")


def gbk_to_utf8(data: bytes) -> str:
    """Decode GBK bytes into a str (replacing undecodable bytes)."""
    return convert_encoding(data, "GBK", "UTF-8").decode("utf-8")
