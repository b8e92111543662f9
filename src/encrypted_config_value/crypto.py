"""
Cryptographic primitives behind the AES and RSA encrypted values.

This module provides:
- SecureKey: Secure key wrapper with automatic zeroization
- GcmSealed: AES-GCM output split into nonce, ciphertext and tag
- AesGcmCipher: AES-256-GCM encryption/decryption operations
- RsaOaepCipher: RSA-OAEP encryption/decryption operations
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .algorithm import HashAlgorithm
from .errors import DecryptionError, EncryptionError, InvalidKeyError

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
LEGACY_NONCE_SIZE: int = 32  # nonce length used by pre-JSON values
TAG_SIZE: int = 16  # 128 bits (authentication tag)


class SecureKey:
    """
    Secure key wrapper with automatic memory cleanup on deletion.

    Uses bytearray internally for mutable zeroing in __del__.
    Python's garbage collector doesn't guarantee immediate cleanup,
    so this is best-effort zeroization.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise InvalidKeyError("Key must be bytes or bytearray")
        self._bytes = bytearray(key_bytes)

    def as_bytes(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecureKey):
            return NotImplemented
        return secrets.compare_digest(bytes(self._bytes), bytes(other._bytes))

    def __hash__(self) -> int:
        return hash(bytes(self._bytes))

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecureKey([REDACTED])"

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


@dataclass(frozen=True)
class GcmSealed:
    """
    AES-GCM output with the authentication tag held apart from the ciphertext.

    `cryptography` appends the tag to the ciphertext; the wire format stores
    them in separate fields.
    """

    nonce: bytes
    ciphertext: bytes
    tag: bytes

    @classmethod
    def from_sealed(cls, nonce: bytes, sealed: bytes) -> GcmSealed:
        """Split `ciphertext || tag` as returned by AESGCM.encrypt."""
        if len(sealed) < TAG_SIZE:
            raise DecryptionError("Sealed data shorter than authentication tag")
        return cls(nonce=nonce, ciphertext=sealed[:-TAG_SIZE], tag=sealed[-TAG_SIZE:])

    @classmethod
    def from_legacy_blob(cls, blob: bytes) -> GcmSealed:
        """
        Parse the legacy layout: nonce(32) || ciphertext || tag(16).

        Raises:
            DecryptionError: If blob is too small
        """
        min_size = LEGACY_NONCE_SIZE + TAG_SIZE
        if len(blob) < min_size:
            raise DecryptionError(
                f"Legacy blob too small: expected at least {min_size} bytes, got {len(blob)}"
            )
        return cls.from_sealed(blob[:LEGACY_NONCE_SIZE], blob[LEGACY_NONCE_SIZE:])

    def sealed(self) -> bytes:
        """Return `ciphertext || tag` as expected by AESGCM.decrypt."""
        return self.ciphertext + self.tag


class AesGcmCipher:
    """AES-256-GCM authenticated encryption."""

    @staticmethod
    def _check_key(key: SecureKey) -> None:
        if len(key) != AES_256_KEY_SIZE:
            raise InvalidKeyError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key)}"
            )

    @staticmethod
    def encrypt(key: SecureKey, plaintext: bytes, nonce_size: int = NONCE_SIZE) -> GcmSealed:
        """
        Encrypt plaintext with AES-256-GCM under a fresh random nonce.

        Args:
            key: 32-byte encryption key
            plaintext: Data to encrypt
            nonce_size: Nonce length in bytes

        Returns:
            GcmSealed with nonce, ciphertext and tag

        Raises:
            InvalidKeyError: If key size is invalid
        """
        AesGcmCipher._check_key(key)
        nonce = secrets.token_bytes(nonce_size)
        sealed = AESGCM(key.as_bytes()).encrypt(nonce, plaintext, None)
        return GcmSealed.from_sealed(nonce, sealed)

    @staticmethod
    def decrypt(key: SecureKey, data: GcmSealed) -> bytes:
        """
        Decrypt and authenticate with AES-256-GCM.

        Raises:
            InvalidKeyError: If key size is invalid
            DecryptionError: If the nonce is unusable or authentication fails
        """
        AesGcmCipher._check_key(key)
        if len(data.tag) != TAG_SIZE:
            raise DecryptionError(
                f"Invalid tag size: expected {TAG_SIZE}, got {len(data.tag)}"
            )

        aesgcm = AESGCM(key.as_bytes())
        try:
            return aesgcm.decrypt(data.nonce, data.sealed(), None)
        except (InvalidTag, ValueError) as e:
            # Generic error to prevent oracle attacks
            raise DecryptionError("Decryption failed") from e


class RsaOaepCipher:
    """RSA encryption with OAEP padding."""

    @staticmethod
    def _padding(oaep_hash: HashAlgorithm, mgf1_hash: HashAlgorithm) -> padding.OAEP:
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=mgf1_hash.new()),
            algorithm=oaep_hash.new(),
            label=None,
        )

    @staticmethod
    def encrypt(
        public_key: rsa.RSAPublicKey,
        plaintext: bytes,
        oaep_hash: HashAlgorithm = HashAlgorithm.SHA256,
        mgf1_hash: HashAlgorithm = HashAlgorithm.SHA256,
    ) -> bytes:
        """
        Encrypt plaintext to an RSA public key.

        Raises:
            EncryptionError: If plaintext is too long for the key size
        """
        try:
            return public_key.encrypt(
                plaintext, RsaOaepCipher._padding(oaep_hash, mgf1_hash)
            )
        except ValueError as e:
            raise EncryptionError(f"Encryption failed: {e}") from e

    @staticmethod
    def decrypt(
        private_key: rsa.RSAPrivateKey,
        ciphertext: bytes,
        oaep_hash: HashAlgorithm = HashAlgorithm.SHA256,
        mgf1_hash: HashAlgorithm = HashAlgorithm.SHA256,
    ) -> bytes:
        """
        Decrypt RSA-OAEP ciphertext.

        Raises:
            DecryptionError: If padding check or key size check fails
        """
        try:
            return private_key.decrypt(
                ciphertext, RsaOaepCipher._padding(oaep_hash, mgf1_hash)
            )
        except ValueError as e:
            raise DecryptionError("Decryption failed") from e
