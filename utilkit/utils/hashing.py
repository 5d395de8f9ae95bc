"""MD5 hex digests for cache keys, file fingerprints and legacy API signatures."""

import hashlib
from typing import Union


def md5_hex(text: Union[str, bytes]) -> str:
    """
    Return the lowercase hex MD5 digest of text.

    str input is hashed as UTF-8; bytes are hashed as-is.

    Example:
        >>> md5_hex("")
        'd41d8cd98f00b204e9800998ecf8427e'
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    return hashlib.md5(data).hexdigest()
