"""
Envelope codec: "enc:<base64>" strings to EncryptedValue variants and back.

The base64 payload is either raw ciphertext (values written before the JSON
format existed) or a UTF-8 JSON document whose "type" field names the
algorithm. If the payload parses as JSON of any kind it is treated as the
JSON format; otherwise it is treated as legacy ciphertext.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from loguru import logger

from .algorithm import AlgorithmType
from .envelope import decode_envelope, is_json, parse_json
from .errors import EnvelopeFormatError, InvalidEnvelopeShapeError
from .values import (
    AESGCMEncryptedValue,
    EncryptedValue,
    LegacyEncryptedValue,
    RSAOAEPEncryptedValue,
)

# One entry per AlgorithmType; add both together.
_VARIANT_DECODERS: Dict[AlgorithmType, Callable[[Dict[str, Any]], EncryptedValue]] = {
    AlgorithmType.AES: AESGCMEncryptedValue.from_json_dict,
    AlgorithmType.RSA: RSAOAEPEncryptedValue.from_json_dict,
}


def _read_algorithm(payload: bytes) -> Tuple[AlgorithmType, Dict[str, Any]]:
    """Parse the document and read only its "type" field."""
    doc = parse_json(payload)
    if not isinstance(doc, dict):
        raise InvalidEnvelopeShapeError(
            f"Encrypted value JSON must be an object, was {type(doc).__name__}"
        )
    type_str = doc.get("type")
    if not isinstance(type_str, str):
        raise InvalidEnvelopeShapeError('Encrypted value JSON must have a string "type" field')
    return AlgorithmType.from_str(type_str), doc


def new_encrypted_value(envelope: str) -> EncryptedValue:
    """
    Create an encrypted value from its "enc:<base64>" string representation.

    Args:
        envelope: Serialized encrypted value

    Returns:
        The variant matching the payload's declared algorithm, or
        LegacyEncryptedValue if the payload is not JSON

    Raises:
        MalformedEnvelopeError: If the "enc:" prefix is missing
        InvalidEncodingError: If the content is not valid base64
        InvalidEnvelopeShapeError: If the JSON is not an object with a string "type"
        UnknownAlgorithmError: If "type" is not a supported algorithm
        InvalidVariantShapeError: If algorithm-specific fields are missing or mistyped
    """
    payload = decode_envelope(envelope)

    if not is_json(payload):
        logger.debug("Encrypted value payload is not JSON, treating as legacy ciphertext")
        return LegacyEncryptedValue(encrypted_bytes=payload)

    algorithm, doc = _read_algorithm(payload)
    logger.debug(f"Decoding {algorithm} encrypted value")
    return _VARIANT_DECODERS[algorithm](doc)


def must_new_encrypted_value(envelope: str) -> EncryptedValue:
    """
    Like new_encrypted_value, but a bad value is a programming error.

    Only for values known to be well formed, such as constants in source code.
    Never use on input read from files, environment variables or users.

    Raises:
        AssertionError: If the value cannot be decoded
    """
    try:
        return new_encrypted_value(envelope)
    except EnvelopeFormatError as e:
        raise AssertionError(f"Invalid constant encrypted value: {e}") from e


def to_serializable(value: EncryptedValue) -> str:
    """
    Serialize an encrypted value to "enc:<base64>".

    Raises:
        SerializationError: If the value's JSON document cannot be encoded
    """
    return value.to_serializable()
