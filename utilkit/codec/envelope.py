"""
JSON response envelopes, optionally wrapped as JSONP.

**Conceptual**: API-style handlers answer with the same small structure every
time: a human-readable message, a success flag, a machine-readable code, and
an arbitrary data payload:

    {"message": "saved", "success": true, "code": "ok", "data": {...}}

When the caller supplies a JSONP callback name the JSON text becomes the sole
argument of that callback: `cb({"message": ...})`.

**Error policy**:
  - Encoding a payload that json cannot serialize raises EnvelopeEncodeError.
    The caller is expected to pass serializable data, so this signals a bug.
  - Decoding malformed JSON raises EnvelopeDecodeError.
  - Decoding text without a `(...)` wrapper as JSONP raises InvalidJsonpError.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Type

logger = logging.getLogger(__name__)

CODE_OK = "ok"
CODE_ERROR = "error"


class EnvelopeError(Exception):
    """Base exception for envelope encoding/decoding errors."""
    pass


class EnvelopeEncodeError(EnvelopeError):
    """
    Raised when the envelope payload cannot be serialized to JSON.

    **Recovery**: Convert the payload to plain dicts/lists/strings/numbers
    before building the envelope.
    """
    pass


class EnvelopeDecodeError(EnvelopeError, ValueError):
    """Raised when text is not valid JSON or does not fit the target type."""
    pass


class InvalidJsonpError(EnvelopeDecodeError):
    """Raised when text has no `callback(...)` wrapper to strip."""
    pass


@dataclass(frozen=True)
class Envelope:
    """
    Tagged success/failure response.

    Attributes:
        message: Human-readable message.
        success: Whether the operation succeeded.
        code: Machine-readable code. An empty code is replaced by "ok" or
              "error" depending on success, so code is never empty.
        data: Arbitrary JSON-serializable payload.
    """
    message: str = ""
    success: bool = False
    code: str = ""
    data: Any = None

    def __post_init__(self):
        if not self.code:
            # frozen dataclass: bypass __setattr__ to fill in the default
            object.__setattr__(self, "code", CODE_OK if self.success else CODE_ERROR)

    def to_dict(self) -> dict:
        """Field-ordered dict (message, success, code, data)."""
        return {
            "message": self.message,
            "success": self.success,
            "code": self.code,
            "data": self.data,
        }


def encode_envelope(
    message: str,
    success: bool,
    data: Any = None,
    jsonp_callback: str = "",
    code: str = "",
) -> str:
    """
    Build an envelope and serialize it to JSON (or JSONP) text.

    Args:
        message: Human-readable message.
        success: Success flag.
        data: JSON-serializable payload.
        jsonp_callback: When non-empty, wrap the JSON as `callback(json)`.
        code: Result code; empty means "ok"/"error" from success.

    Returns:
        Compact JSON text, or JSONP text if a callback was given.

    Raises:
        EnvelopeEncodeError: If data cannot be serialized.

    Example:
        >>> encode_envelope("done", True, {"id": 1})
        '{"message":"done","success":true,"code":"ok","data":{"id":1}}'
        >>> encode_envelope("", False, None, jsonp_callback="cb")
        'cb({"message":"","success":false,"code":"error","data":null})'
    """
    envelope = Envelope(message=message, success=success, code=code, data=data)

    try:
        text = json.dumps(envelope.to_dict(), ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        logger.error("Failed to serialize envelope payload of type %s: %s", type(data).__name__, e)
        raise EnvelopeEncodeError(f"envelope data is not JSON serializable: {e}") from e

    if jsonp_callback:
        text = f"{jsonp_callback}({text})"

    return text


def decode_json(text: str, target: Optional[Type] = None) -> Any:
    """
    Parse JSON text, optionally into a dataclass.

    **Functionally**:
      - target=None: return whatever json.loads produces.
      - target is a dataclass type: the parsed object must be a JSON object;
        its keys matching the dataclass fields are passed to the constructor
        and any other keys are ignored.

    Args:
        text: JSON text.
        target: Optional dataclass type (e.g. Envelope).

    Returns:
        Parsed value, or an instance of target.

    Raises:
        EnvelopeDecodeError: On malformed JSON, or when the parsed value does
                             not fit target.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise EnvelopeDecodeError(f"invalid JSON: {e}") from e

    if target is None:
        return value

    if not dataclasses.is_dataclass(target):
        raise TypeError(f"target must be a dataclass type, got: {target!r}")

    if not isinstance(value, dict):
        raise EnvelopeDecodeError(
            f"cannot decode JSON {type(value).__name__} into {target.__name__}"
        )

    field_names = {f.name for f in dataclasses.fields(target)}
    kwargs = {k: v for k, v in value.items() if k in field_names}
    try:
        return target(**kwargs)
    except TypeError as e:
        raise EnvelopeDecodeError(f"cannot decode JSON into {target.__name__}: {e}") from e


def decode_jsonp(text: str, target: Optional[Type] = None) -> Any:
    """
    Strip a `callback(...)` wrapper and parse the JSON inside.

    The payload is everything between the FIRST "(" and the LAST ")". This is
    correct only when the callback wrapper is the outermost pair of parens,
    which is the case for text produced by encode_envelope.

    Raises:
        InvalidJsonpError: If "(" or ")" is missing, or ")" comes first.
        EnvelopeDecodeError: If the unwrapped payload is not valid JSON.
    """
    start = text.find("(")
    end = text.rfind(")")

    if start == -1 or end == -1 or end < start:
        raise InvalidJsonpError("input is not valid jsonp string")

    return decode_json(text[start + 1:end], target)
