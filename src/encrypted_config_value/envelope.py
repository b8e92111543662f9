"""
The "enc:<base64>" textual wrapper.

Knows nothing about algorithms: it turns payload bytes into an envelope
string and back, and tells JSON payloads apart from raw legacy ciphertext.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict

from .errors import InvalidEncodingError, MalformedEnvelopeError, SerializationError

ENC_PREFIX = "enc:"


def encode_envelope(payload: bytes) -> str:
    """Wrap payload bytes as "enc:<base64>"."""
    return ENC_PREFIX + base64.standard_b64encode(payload).decode("ascii")


def decode_envelope(envelope: str) -> bytes:
    """
    Unwrap an envelope string into its payload bytes.

    Raises:
        MalformedEnvelopeError: If the "enc:" prefix is missing
        InvalidEncodingError: If the content is not standard base64
    """
    if not envelope.startswith(ENC_PREFIX):
        raise MalformedEnvelopeError(
            f'Encrypted value must be of the form "{ENC_PREFIX}...", was: {envelope!r}'
        )
    content = envelope[len(ENC_PREFIX) :]
    try:
        return base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Failed to base64-decode content: {e}") from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_json(data: bytes) -> Any:
    """
    Parse data as strict UTF-8 JSON.

    Unlike json.loads on bytes, this does not guess UTF-16/UTF-32, does not
    accept a byte order mark and rejects NaN/Infinity.

    Raises:
        ValueError: If data is not valid UTF-8 JSON
        RecursionError: If data nests deeper than the parser allows
    """
    return json.loads(data.decode("utf-8"), parse_constant=_reject_constant)


def is_json(data: bytes) -> bool:
    """
    Whether data parses as any JSON value.

    Pre-JSON values carry raw ciphertext, which is effectively random and
    parses as JSON only with negligible probability.
    """
    try:
        parse_json(data)
    except (ValueError, RecursionError):
        return False
    return True


def dump_json_payload(doc: Dict[str, Any]) -> bytes:
    """Serialize a variant's JSON document to compact UTF-8 bytes."""
    try:
        return json.dumps(doc, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize encrypted value: {e}") from e
