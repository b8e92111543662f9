"""
Exception classes for encrypted config value operations.

Every error raised by this package derives from EncryptedValueError, so
callers that only care about "could not use this value" can catch one type.
"""

from __future__ import annotations


class EncryptedValueError(Exception):
    """Base exception for all encrypted config value operations."""

    pass


class EnvelopeFormatError(EncryptedValueError):
    """The envelope string could not be decoded into an encrypted value."""

    pass


class MalformedEnvelopeError(EnvelopeFormatError):
    """Envelope string does not start with the "enc:" prefix."""

    pass


class InvalidEncodingError(EnvelopeFormatError):
    """Envelope content is not valid base64."""

    pass


class InvalidEnvelopeShapeError(EnvelopeFormatError):
    """Payload is JSON but not an object with a string "type" field."""

    pass


class InvalidVariantShapeError(EnvelopeFormatError):
    """Payload fields are missing or mistyped for the declared algorithm."""

    pass


class UnknownAlgorithmError(EnvelopeFormatError):
    """Payload declares an algorithm type that is not supported."""

    pass


class KeyAlgorithmMismatchError(EncryptedValueError):
    """Key cannot be used with the algorithm (or in the role) requested."""

    pass


class EncryptionError(EncryptedValueError):
    """Cryptographic operation could not encrypt the plaintext with the key."""

    pass


class DecryptionError(EncryptedValueError):
    """Cryptographic operation rejected the ciphertext/key pair."""

    pass


class SerializationError(EncryptedValueError):
    """Serialization of an encrypted value failed."""

    pass


class InvalidKeyError(EncryptedValueError):
    """Key string or key material could not be parsed."""

    pass


class ConfigError(EncryptedValueError):
    """Configuration error (missing or unreadable key source)."""

    pass
