import base64
import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict

import pytest

from encrypted_config_value import (
    AESGCMEncryptedValue,
    AlgorithmType,
    HashAlgorithm,
    InvalidEncodingError,
    InvalidEnvelopeShapeError,
    InvalidVariantShapeError,
    LegacyEncryptedValue,
    MalformedEnvelopeError,
    RSAOAEPEncryptedValue,
    SerializationError,
    TypedEncryptedValue,
    UnknownAlgorithmError,
    is_json,
    must_new_encrypted_value,
    new_encrypted_value,
    to_serializable,
)


def _envelope(payload: bytes) -> str:
    return "enc:" + base64.standard_b64encode(payload).decode("ascii")


def _json_envelope(doc: Any) -> str:
    return _envelope(json.dumps(doc).encode("utf-8"))


def _b64(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


@pytest.mark.parametrize(
    "value",
    [
        AESGCMEncryptedValue(ciphertext=b"ciphertext", nonce=b"\x00" * 12, tag=b"\x01" * 16),
        AESGCMEncryptedValue(ciphertext=b"", nonce=b"\xff" * 12, tag=b"\xfe" * 16),
        RSAOAEPEncryptedValue(ciphertext=b"\x00\x01\x02\xff" * 64),
    ],
)
def test_roundtrip(value):
    """Decoding the serialized form gives back an equal value."""
    serialized = to_serializable(value)

    assert serialized.startswith("enc:")
    decoded = new_encrypted_value(serialized)
    assert type(decoded) is type(value)
    assert decoded == value


def test_aes_json_shape():
    value = AESGCMEncryptedValue(ciphertext=b"ct", nonce=b"iv", tag=b"tag")
    payload = base64.standard_b64decode(value.to_serializable()[len("enc:") :])

    assert json.loads(payload) == {
        "type": "AES",
        "mode": "GCM",
        "ciphertext": _b64(b"ct"),
        "iv": _b64(b"iv"),
        "tag": _b64(b"tag"),
    }


def test_rsa_json_shape():
    value = RSAOAEPEncryptedValue(ciphertext=b"ct")
    payload = base64.standard_b64decode(value.to_serializable()[len("enc:") :])

    assert json.loads(payload) == {
        "type": "RSA",
        "mode": "OAEP",
        "ciphertext": _b64(b"ct"),
        "oaep-alg": "SHA-256",
        "mdf1-alg": "SHA-256",
    }


def test_non_json_payload_is_legacy():
    """Bytes that do not parse as JSON decode to a legacy value holding exactly those bytes."""
    raw = bytes(range(200, 232))

    value = new_encrypted_value(_envelope(raw))

    assert isinstance(value, LegacyEncryptedValue)
    assert value.encrypted_bytes == raw


@pytest.mark.parametrize(
    "raw",
    [
        b"[" * 100000,
        b"NaN",
        '{"type": "AES"}'.encode("utf-16"),
    ],
)
def test_non_strict_json_payload_is_legacy(raw):
    """Deeply nested, non-standard or non-UTF-8 JSON takes the legacy path."""
    value = new_encrypted_value(_envelope(raw))

    assert value == LegacyEncryptedValue(encrypted_bytes=raw)


def test_empty_payload_is_legacy():
    value = new_encrypted_value("enc:")

    assert value == LegacyEncryptedValue(encrypted_bytes=b"")


def test_legacy_reserializes_to_raw_payload():
    raw = b"\x80" + bytes(range(1, 40))
    envelope = _envelope(raw)

    value = new_encrypted_value(envelope)

    assert value.to_serializable() == envelope
    assert new_encrypted_value(value.to_serializable()) == value


def test_json_payload_is_never_legacy():
    """A JSON payload with a ciphertext-looking field still decodes as the tagged variant."""
    envelope = _json_envelope({
        "type": "AES",
        "ciphertext": _b64(bytes(range(200, 232))),
        "iv": _b64(b"\x00" * 12),
        "tag": _b64(b"\x00" * 16),
    })

    value = new_encrypted_value(envelope)

    assert isinstance(value, AESGCMEncryptedValue)
    assert value.ciphertext == bytes(range(200, 232))


def test_rsa_defaults_hash_algorithms():
    value = new_encrypted_value(_json_envelope({"type": "RSA", "ciphertext": _b64(b"ct")}))

    assert value == RSAOAEPEncryptedValue(
        ciphertext=b"ct", oaep_hash=HashAlgorithm.SHA256, mgf1_hash=HashAlgorithm.SHA256
    )


def test_unknown_algorithm():
    with pytest.raises(UnknownAlgorithmError, match="ROT13"):
        new_encrypted_value(_json_envelope({"type": "ROT13"}))


def test_algorithm_is_case_sensitive():
    with pytest.raises(UnknownAlgorithmError):
        new_encrypted_value(_json_envelope({"type": "aes"}))


@pytest.mark.parametrize("envelope", ["notenc:abc", "", "ENC:YWJj", " enc:YWJj"])
def test_missing_prefix(envelope):
    with pytest.raises(MalformedEnvelopeError, match="must be of the form"):
        new_encrypted_value(envelope)


@pytest.mark.parametrize("envelope", ["enc:not-valid-base64!!", "enc:YWJ", "enc:YW Jj"])
def test_invalid_base64(envelope):
    with pytest.raises(InvalidEncodingError):
        new_encrypted_value(envelope)


@pytest.mark.parametrize(
    "doc",
    [
        [1, 2, 3],
        "a string",
        42,
        None,
        {"ciphertext": "YWJj"},
        {"type": 5},
        {"type": None},
    ],
)
def test_json_without_usable_type(doc):
    with pytest.raises(InvalidEnvelopeShapeError):
        new_encrypted_value(_json_envelope(doc))


@pytest.mark.parametrize(
    "doc",
    [
        {"type": "AES"},
        {"type": "AES", "ciphertext": _b64(b"ct"), "iv": _b64(b"iv")},
        {"type": "AES", "ciphertext": "***", "iv": _b64(b"iv"), "tag": _b64(b"tag")},
        {"type": "AES", "ciphertext": 7, "iv": _b64(b"iv"), "tag": _b64(b"tag")},
        {"type": "AES", "mode": "CBC", "ciphertext": _b64(b"ct"), "iv": _b64(b"iv"), "tag": _b64(b"t")},
        {"type": "RSA"},
        {"type": "RSA", "ciphertext": _b64(b"ct"), "oaep-alg": "MD5"},
        {"type": "RSA", "ciphertext": _b64(b"ct"), "mdf1-alg": 256},
        {"type": "RSA", "mode": "PKCS1", "ciphertext": _b64(b"ct")},
    ],
)
def test_invalid_variant_fields(doc):
    with pytest.raises(InvalidVariantShapeError):
        new_encrypted_value(_json_envelope(doc))


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"{}", True),
        (b"[]", True),
        (b'"text"', True),
        (b"123", True),
        (b"true", True),
        (b"null", True),
        (b'{"type":"AES"}', True),
        (b"", False),
        (b"{", False),
        (b"\x80abc", False),
        (bytes(range(200, 232)), False),
        (b"NaN", False),
        (b"Infinity", False),
        (b"-Infinity", False),
        ("{}".encode("utf-16"), False),
        (b"\xef\xbb\xbf{}", False),
        (b"[" * 100000, False),
    ],
)
def test_is_json(data, expected):
    assert is_json(data) is expected


def test_must_new_encrypted_value():
    value = AESGCMEncryptedValue(ciphertext=b"ct", nonce=b"iv", tag=b"tag")

    assert must_new_encrypted_value(value.to_serializable()) == value


def test_must_new_encrypted_value_fails_loudly():
    with pytest.raises(AssertionError, match="Invalid constant encrypted value"):
        must_new_encrypted_value("notenc:abc")


@dataclass(frozen=True)
class _UnserializableValue(TypedEncryptedValue):
    algorithm: ClassVar[AlgorithmType] = AlgorithmType.AES

    @classmethod
    def from_json_dict(cls, doc: Dict[str, Any]) -> "_UnserializableValue":
        return cls()

    def to_json_dict(self) -> Dict[str, Any]:
        return {"type": "AES", "ciphertext": object()}

    def decrypt(self, key):
        raise NotImplementedError


def test_serialization_error():
    with pytest.raises(SerializationError):
        to_serializable(_UnserializableValue())
