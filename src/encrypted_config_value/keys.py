"""
Typed key material.

A key is serialized as "<type>:<base64>", where type is one of:
- "aes": raw 32-byte AES-256 key
- "rsa-pub": DER-encoded SubjectPublicKeyInfo
- "rsa-priv": DER-encoded PKCS#8 private key

This module only parses and serializes keys. Generating them is left to the
caller (e.g. `cryptography`'s rsa.generate_private_key).
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .algorithm import AlgorithmType
from .crypto import AES_256_KEY_SIZE, SecureKey
from .errors import InvalidKeyError

KeyMaterial = Union[SecureKey, rsa.RSAPublicKey, rsa.RSAPrivateKey]


class KeyRole(Enum):
    """What a key may be used for."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"

    def __str__(self) -> str:
        return self.value


class KeyType(Enum):
    """Type of key, named by its serialized prefix."""

    AES = "aes"  # Symmetric: both encrypts and decrypts
    RSA_PUBLIC = "rsa-pub"  # Encrypts only
    RSA_PRIVATE = "rsa-priv"  # Decrypts only

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, s: str) -> KeyType:
        """Parse from the serialized prefix."""
        try:
            return cls(s)
        except ValueError:
            raise InvalidKeyError(f"Unrecognized key type: {s}")

    @property
    def algorithm(self) -> AlgorithmType:
        if self is KeyType.AES:
            return AlgorithmType.AES
        return AlgorithmType.RSA

    def can(self, role: KeyRole) -> bool:
        """Whether a key of this type can be used in the given role."""
        if self is KeyType.AES:
            return True
        if self is KeyType.RSA_PUBLIC:
            return role is KeyRole.ENCRYPT
        return role is KeyRole.DECRYPT


@dataclass(frozen=True)
class KeyWithType:
    """Key material tagged with the algorithm and role it is valid for."""

    key_type: KeyType
    key: KeyMaterial = field(repr=False)

    def __post_init__(self) -> None:
        expected = {
            KeyType.AES: SecureKey,
            KeyType.RSA_PUBLIC: rsa.RSAPublicKey,
            KeyType.RSA_PRIVATE: rsa.RSAPrivateKey,
        }[self.key_type]
        if not isinstance(self.key, expected):
            raise InvalidKeyError(
                f"Key material for {self.key_type} must be {expected.__name__}, "
                f"was {type(self.key).__name__}"
            )

    @classmethod
    def from_aes_bytes(cls, key_bytes: bytes) -> KeyWithType:
        if len(key_bytes) != AES_256_KEY_SIZE:
            raise InvalidKeyError(
                f"Invalid AES key size: expected {AES_256_KEY_SIZE}, got {len(key_bytes)}"
            )
        return cls(key_type=KeyType.AES, key=SecureKey(key_bytes))

    @classmethod
    def from_rsa_public_key(cls, public_key: rsa.RSAPublicKey) -> KeyWithType:
        return cls(key_type=KeyType.RSA_PUBLIC, key=public_key)

    @classmethod
    def from_rsa_private_key(cls, private_key: rsa.RSAPrivateKey) -> KeyWithType:
        return cls(key_type=KeyType.RSA_PRIVATE, key=private_key)

    @classmethod
    def from_str(cls, s: str) -> KeyWithType:
        """
        Parse a key from its "<type>:<base64>" form.

        Raises:
            InvalidKeyError: If the type is unknown or the material is unparseable
        """
        type_str, sep, content = s.strip().partition(":")
        if not sep:
            raise InvalidKeyError('Key must be of the form "<type>:<base64>"')
        key_type = KeyType.from_str(type_str)

        try:
            key_bytes = base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidKeyError(f"Failed to base64-decode {key_type} key: {e}") from e

        if key_type is KeyType.AES:
            return cls.from_aes_bytes(key_bytes)

        try:
            if key_type is KeyType.RSA_PUBLIC:
                loaded = serialization.load_der_public_key(key_bytes)
            else:
                loaded = serialization.load_der_private_key(key_bytes, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError(f"Failed to parse {key_type} key: {e}") from e

        if key_type is KeyType.RSA_PUBLIC and isinstance(loaded, rsa.RSAPublicKey):
            return cls.from_rsa_public_key(loaded)
        if key_type is KeyType.RSA_PRIVATE and isinstance(loaded, rsa.RSAPrivateKey):
            return cls.from_rsa_private_key(loaded)
        raise InvalidKeyError(f"Key declared as {key_type} is not an RSA key")

    def to_serializable(self) -> str:
        """Return the "<type>:<base64>" form accepted by from_str."""
        if isinstance(self.key, SecureKey):
            raw = self.key.as_bytes()
        elif isinstance(self.key, rsa.RSAPublicKey):
            raw = self.key.public_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        else:
            raw = self.key.private_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        return f"{self.key_type}:{base64.standard_b64encode(raw).decode('ascii')}"
