"""
utils.py - Digest and canonical JSON helpers for the hashledger package.
"""

import base64
import binascii
import hashlib
import json
from typing import Any, Dict, Mapping

from .exceptions import DecodeError, EncodingError, ParseError
from .metrics import DECODE_ERRORS


def decode_hash(value: str) -> bytes:
    """
    Decode a base64 hash (standard alphabet, padding required).

    Raises:
        DecodeError: if ``value`` is not a string or not valid base64.
    """
    if not isinstance(value, str):
        DECODE_ERRORS.inc()
        raise DecodeError(value, f"Hash must be a base64 string, got {type(value).__name__}")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        DECODE_ERRORS.inc()
        raise DecodeError(value, f"Invalid base64 hash {value!r}: {e}") from e


def encode_payload(transactions: str) -> bytes:
    """
    Return the UTF-8 bytes of a payload.

    Raises:
        EncodingError: if the payload holds lone surrogates or is not a string.
    """
    try:
        return transactions.encode("utf-8")
    except (AttributeError, UnicodeEncodeError) as e:
        raise EncodingError(f"Payload cannot be encoded as UTF-8: {e}") from e


def digest(parent_hash: str, transactions: str) -> str:
    """
    Compute ``base64(SHA256(base64_decode(parent_hash) + utf8(transactions)))``.
    """
    hasher = hashlib.sha256()
    hasher.update(decode_hash(parent_hash))
    hasher.update(encode_payload(transactions))
    return base64.b64encode(hasher.digest()).decode("ascii")


def to_canonical_json(data: Any) -> str:
    """Serialize preserving key order, without whitespace or ASCII escaping."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def load_json_object(text: str, kind: str) -> Dict[str, Any]:
    """Parse ``text`` as a JSON object, raising ParseError otherwise."""
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise ParseError(f"Invalid {kind} JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"{kind} JSON must be an object, got {type(data).__name__}")
    return data


def require_str(data: Mapping[str, Any], field: str, kind: str) -> str:
    """Return ``data[field]`` if it is a string, raising ParseError otherwise."""
    if field not in data:
        raise ParseError(f"{kind} is missing field '{field}'")
    value = data[field]
    if not isinstance(value, str):
        raise ParseError(f"{kind} field '{field}' must be a string, got {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ParseError(f"{kind} field '{field}' is not valid UTF-8 text: {e}") from e
    return value


__all__ = [
    "decode_hash",
    "encode_payload",
    "digest",
    "to_canonical_json",
    "load_json_object",
    "require_str",
]
