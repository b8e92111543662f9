"""
Encrypted value variants.

This module provides:
- EncryptedValue: Capability surface shared by every variant (decrypt, to_serializable)
- AESGCMEncryptedValue: AES-256-GCM value, JSON "type" = "AES"
- RSAOAEPEncryptedValue: RSA-OAEP value, JSON "type" = "RSA"
- LegacyEncryptedValue: Raw ciphertext from before the JSON format existed

Values are immutable and own no resources.
"""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from cryptography.hazmat.primitives.asymmetric import rsa
from loguru import logger

from .algorithm import AlgorithmType, HashAlgorithm
from .crypto import AesGcmCipher, GcmSealed, RsaOaepCipher, SecureKey
from .envelope import dump_json_payload, encode_envelope
from .errors import DecryptionError, InvalidVariantShapeError, KeyAlgorithmMismatchError
from .keys import KeyRole, KeyType, KeyWithType

AES_GCM_MODE = "GCM"
RSA_OAEP_MODE = "OAEP"


def _b64encode(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


def _str_field(doc: Dict[str, Any], name: str) -> str:
    value = doc.get(name)
    if not isinstance(value, str):
        raise InvalidVariantShapeError(f'Field "{name}" must be a string')
    return value


def _bytes_field(doc: Dict[str, Any], name: str) -> bytes:
    encoded = _str_field(doc, name)
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidVariantShapeError(f'Field "{name}" is not valid base64') from e


def _check_mode(doc: Dict[str, Any], expected: str) -> None:
    if "mode" in doc and doc["mode"] != expected:
        raise InvalidVariantShapeError(f"Unsupported mode: {doc['mode']!r}, expected {expected}")


def _to_text(plaintext: bytes) -> str:
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("Decrypted value is not valid UTF-8") from e


class EncryptedValue(ABC):
    """A value that a matching KeyWithType can turn back into plaintext."""

    @abstractmethod
    def decrypt(self, key: KeyWithType) -> str:
        """
        Decrypt this value with the provided key.

        Raises:
            KeyAlgorithmMismatchError: If the key cannot decrypt this kind of value
            DecryptionError: If the ciphertext/key pair is rejected
        """

    @abstractmethod
    def to_serializable(self) -> str:
        """Return the "enc:<base64>" string that decodes back to this value."""


class TypedEncryptedValue(EncryptedValue):
    """Variant that serializes to a JSON document carrying a "type" tag."""

    algorithm: ClassVar[AlgorithmType]

    @classmethod
    @abstractmethod
    def from_json_dict(cls, doc: Dict[str, Any]) -> TypedEncryptedValue:
        """Build from a parsed JSON document whose "type" matches this variant."""

    @abstractmethod
    def to_json_dict(self) -> Dict[str, Any]:
        """Return the JSON document for this value."""

    def to_serializable(self) -> str:
        return encode_envelope(dump_json_payload(self.to_json_dict()))

    def _check_key(self, key: KeyWithType) -> None:
        if key.key_type.algorithm is not self.algorithm:
            raise KeyAlgorithmMismatchError(
                f"Key of type {key.key_type} cannot decrypt {self.algorithm} value"
            )
        if not key.key_type.can(KeyRole.DECRYPT):
            raise KeyAlgorithmMismatchError(f"Key of type {key.key_type} cannot decrypt")


@dataclass(frozen=True)
class AESGCMEncryptedValue(TypedEncryptedValue):
    """AES-256-GCM ciphertext with its nonce and authentication tag."""

    algorithm: ClassVar[AlgorithmType] = AlgorithmType.AES

    ciphertext: bytes
    nonce: bytes
    tag: bytes

    @classmethod
    def from_json_dict(cls, doc: Dict[str, Any]) -> AESGCMEncryptedValue:
        _check_mode(doc, AES_GCM_MODE)
        return cls(
            ciphertext=_bytes_field(doc, "ciphertext"),
            nonce=_bytes_field(doc, "iv"),
            tag=_bytes_field(doc, "tag"),
        )

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "type": self.algorithm.value,
            "mode": AES_GCM_MODE,
            "ciphertext": _b64encode(self.ciphertext),
            "iv": _b64encode(self.nonce),
            "tag": _b64encode(self.tag),
        }

    def decrypt(self, key: KeyWithType) -> str:
        self._check_key(key)
        sealed = GcmSealed(nonce=self.nonce, ciphertext=self.ciphertext, tag=self.tag)
        return _to_text(AesGcmCipher.decrypt(key.key, sealed))


@dataclass(frozen=True)
class RSAOAEPEncryptedValue(TypedEncryptedValue):
    """RSA-OAEP ciphertext and the digests used for its padding."""

    algorithm: ClassVar[AlgorithmType] = AlgorithmType.RSA

    ciphertext: bytes
    oaep_hash: HashAlgorithm = HashAlgorithm.SHA256
    mgf1_hash: HashAlgorithm = HashAlgorithm.SHA256

    @classmethod
    def from_json_dict(cls, doc: Dict[str, Any]) -> RSAOAEPEncryptedValue:
        _check_mode(doc, RSA_OAEP_MODE)
        oaep_hash = HashAlgorithm.SHA256
        mgf1_hash = HashAlgorithm.SHA256
        if "oaep-alg" in doc:
            oaep_hash = HashAlgorithm.from_str(_str_field(doc, "oaep-alg"))
        # "mdf1-alg" is the historical spelling on the wire
        if "mdf1-alg" in doc:
            mgf1_hash = HashAlgorithm.from_str(_str_field(doc, "mdf1-alg"))
        return cls(
            ciphertext=_bytes_field(doc, "ciphertext"),
            oaep_hash=oaep_hash,
            mgf1_hash=mgf1_hash,
        )

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "type": self.algorithm.value,
            "mode": RSA_OAEP_MODE,
            "ciphertext": _b64encode(self.ciphertext),
            "oaep-alg": self.oaep_hash.value,
            "mdf1-alg": self.mgf1_hash.value,
        }

    def decrypt(self, key: KeyWithType) -> str:
        self._check_key(key)
        plaintext = RsaOaepCipher.decrypt(
            key.key, self.ciphertext, self.oaep_hash, self.mgf1_hash
        )
        return _to_text(plaintext)


@dataclass(frozen=True)
class LegacyEncryptedValue(EncryptedValue):
    """
    Raw ciphertext bytes written before values carried an algorithm tag.

    The algorithm is inferred from the key: an AES key expects
    nonce(32) || ciphertext || tag(16), an RSA private key expects
    RSA-OAEP(SHA-256) ciphertext.
    """

    encrypted_bytes: bytes

    def decrypt(self, key: KeyWithType) -> str:
        logger.warning(f"Decrypting legacy encrypted value with {key.key_type} key")
        if key.key_type is KeyType.AES and isinstance(key.key, SecureKey):
            sealed = GcmSealed.from_legacy_blob(self.encrypted_bytes)
            return _to_text(AesGcmCipher.decrypt(key.key, sealed))
        if key.key_type is KeyType.RSA_PRIVATE and isinstance(key.key, rsa.RSAPrivateKey):
            return _to_text(RsaOaepCipher.decrypt(key.key, self.encrypted_bytes))
        raise KeyAlgorithmMismatchError(f"Key of type {key.key_type} cannot decrypt")

    def to_serializable(self) -> str:
        """Re-emit the original raw payload; there is no JSON form for legacy values."""
        return encode_envelope(self.encrypted_bytes)
