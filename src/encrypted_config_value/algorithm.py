"""
Algorithm tags carried in the "type" field of an encrypted value.

This module provides:
- AlgorithmType: Closed set of encryption schemes an envelope can declare
- HashAlgorithm: Digest names used by the RSA-OAEP variant
"""

from __future__ import annotations

from enum import Enum

from cryptography.hazmat.primitives import hashes

from .errors import InvalidVariantShapeError, UnknownAlgorithmError


class AlgorithmType(Enum):
    """Encryption scheme that produced an encrypted value (matches wire "type")."""

    AES = "AES"  # AES-256-GCM
    RSA = "RSA"  # RSA-OAEP

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, s: str) -> AlgorithmType:
        """Parse from the wire value. Matching is case-sensitive."""
        try:
            return cls(s)
        except ValueError:
            raise UnknownAlgorithmError(f"Unrecognized algorithm type: {s}")


class HashAlgorithm(Enum):
    """Digest used for OAEP padding and its MGF1 mask."""

    SHA256 = "SHA-256"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, s: str) -> HashAlgorithm:
        """Parse from the wire value."""
        try:
            return cls(s)
        except ValueError:
            raise InvalidVariantShapeError(f"Unsupported hash algorithm: {s}")

    def new(self) -> hashes.HashAlgorithm:
        """Return a fresh `cryptography` hash instance."""
        if self is HashAlgorithm.SHA256:
            return hashes.SHA256()
        raise InvalidVariantShapeError(f"Unsupported hash algorithm: {self.value}")
