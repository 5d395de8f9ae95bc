"""
Tests for utilkit/codec/envelope.py

These tests verify envelope construction (code defaults), JSON/JSONP output
shape, and the decode error paths.
"""

import json
from dataclasses import dataclass

import pytest

from utilkit.codec.envelope import (
    Envelope,
    EnvelopeDecodeError,
    EnvelopeEncodeError,
    InvalidJsonpError,
    decode_json,
    decode_jsonp,
    encode_envelope,
)


def test_encode_defaults_code_from_success():
    """Empty code becomes "ok" on success and "error" on failure."""
    assert json.loads(encode_envelope("done", True))["code"] == "ok"
    assert json.loads(encode_envelope("nope", False))["code"] == "error"


def test_encode_keeps_explicit_code():
    """A caller-supplied code is never overwritten."""
    payload = json.loads(encode_envelope("denied", False, code="AUTH_401"))
    assert payload["code"] == "AUTH_401"


def test_encode_field_order_and_compact_output():
    """Output is compact JSON with fields in message/success/code/data order."""
    text = encode_envelope("done", True, {"id": 1})
    assert text == '{"message":"done","success":true,"code":"ok","data":{"id":1}}'


def test_encode_keeps_non_ascii_text():
    """Non-ASCII messages are emitted as-is, not \\u-escaped."""
    text = encode_envelope("成功", True)
    assert "成功" in text


def test_encode_jsonp_wraps_callback():
    """A callback name wraps the JSON text as callback(json)."""
    text = encode_envelope("", False, None, jsonp_callback="cb")
    assert text == 'cb({"message":"","success":false,"code":"error","data":null})'


def test_encode_unserializable_data_raises():
    """Data json cannot serialize raises EnvelopeEncodeError instead of aborting."""
    with pytest.raises(EnvelopeEncodeError):
        encode_envelope("bad", True, {"when": object()})


def test_encode_nan_raises():
    """NaN is not valid JSON, so it is rejected too."""
    with pytest.raises(EnvelopeEncodeError):
        encode_envelope("bad", True, float("nan"))


def test_envelope_code_never_empty():
    """Constructing an Envelope directly also fills in the default code."""
    assert Envelope(message="m", success=True).code == "ok"
    assert Envelope(message="m", success=False, code="").code == "error"


def test_decode_json_round_trip_into_envelope():
    """decode(encode(...)) reproduces the envelope with the defaulted code."""
    data = {"items": [1, 2, 3], "next": None}
    envelope = decode_json(encode_envelope("listed", True, data), Envelope)

    assert envelope == Envelope(message="listed", success=True, code="ok", data=data)


def test_decode_json_without_target_returns_plain_value():
    """With no target the parsed JSON value is returned unchanged."""
    assert decode_json('{"a": [1, 2]}') == {"a": [1, 2]}
    assert decode_json("3") == 3


def test_decode_json_ignores_unknown_keys():
    """Keys that are not dataclass fields are dropped."""

    @dataclass
    class Point:
        x: int = 0
        y: int = 0

    assert decode_json('{"x": 1, "y": 2, "z": 3}', Point) == Point(1, 2)


def test_decode_json_malformed_raises():
    """Malformed JSON raises EnvelopeDecodeError (which is a ValueError)."""
    with pytest.raises(EnvelopeDecodeError):
        decode_json('{"message": ')
    with pytest.raises(ValueError):
        decode_json("not json")


def test_decode_json_non_object_into_dataclass_raises():
    """A JSON array cannot become an Envelope."""
    with pytest.raises(EnvelopeDecodeError):
        decode_json("[1, 2]", Envelope)


def test_decode_jsonp_matches_direct_decode():
    """Unwrapping cb(...) yields the same envelope as decoding the JSON directly."""
    text = encode_envelope("ok", True, {"k": "v"}, code="X")
    direct = decode_json(text, Envelope)
    wrapped = decode_jsonp("cb(" + text + ")", Envelope)

    assert wrapped == direct


def test_decode_jsonp_uses_outermost_parens():
    """Parentheses inside the payload survive (first "(" to last ")")."""
    text = encode_envelope("f(x) = (y)", True, jsonp_callback="callback")
    envelope = decode_jsonp(text, Envelope)

    assert envelope.message == "f(x) = (y)"


def test_decode_jsonp_not_wrapped_raises():
    """Text without parens is not JSONP."""
    with pytest.raises(InvalidJsonpError, match="not valid jsonp"):
        decode_jsonp("not wrapped")


def test_decode_jsonp_reversed_parens_raises():
    """A ")" before the first "(" is rejected rather than slicing backwards."""
    with pytest.raises(InvalidJsonpError):
        decode_jsonp(")cb(")


def test_decode_jsonp_bad_payload_raises_decode_error():
    """A proper wrapper around invalid JSON raises the JSON decode error."""
    with pytest.raises(EnvelopeDecodeError) as excinfo:
        decode_jsonp("cb({oops})")
    assert not isinstance(excinfo.value, InvalidJsonpError)
