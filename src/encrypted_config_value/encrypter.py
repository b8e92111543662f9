"""
Encryption side: plaintext + key to a populated encrypted value.

The caller picks the algorithm; there is no default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

from .algorithm import AlgorithmType, HashAlgorithm
from .crypto import AesGcmCipher, RsaOaepCipher
from .errors import KeyAlgorithmMismatchError, UnknownAlgorithmError
from .keys import KeyRole, KeyWithType
from .values import AESGCMEncryptedValue, RSAOAEPEncryptedValue, TypedEncryptedValue


class Encrypter(ABC):
    """Produces encrypted values for one algorithm."""

    algorithm: AlgorithmType

    def _check_key(self, key: KeyWithType) -> None:
        if key.key_type.algorithm is not self.algorithm:
            raise KeyAlgorithmMismatchError(
                f"Key of type {key.key_type} cannot produce {self.algorithm} values"
            )
        if not key.key_type.can(KeyRole.ENCRYPT):
            raise KeyAlgorithmMismatchError(f"Key of type {key.key_type} cannot encrypt")

    @abstractmethod
    def encrypt(self, plaintext: str, key: KeyWithType) -> TypedEncryptedValue:
        """
        Encrypt plaintext with the provided key.

        Raises:
            KeyAlgorithmMismatchError: If the key is not an encryption key for this algorithm
        """


class AESGCMEncrypter(Encrypter):
    """AES-256-GCM with a random 96-bit nonce per value."""

    algorithm = AlgorithmType.AES

    def encrypt(self, plaintext: str, key: KeyWithType) -> AESGCMEncryptedValue:
        self._check_key(key)
        sealed = AesGcmCipher.encrypt(key.key, plaintext.encode("utf-8"))
        return AESGCMEncryptedValue(
            ciphertext=sealed.ciphertext, nonce=sealed.nonce, tag=sealed.tag
        )


class RSAOAEPEncrypter(Encrypter):
    """RSA-OAEP; SHA-256 for both the OAEP digest and MGF1."""

    algorithm = AlgorithmType.RSA

    def __init__(
        self,
        oaep_hash: HashAlgorithm = HashAlgorithm.SHA256,
        mgf1_hash: HashAlgorithm = HashAlgorithm.SHA256,
    ) -> None:
        self._oaep_hash = oaep_hash
        self._mgf1_hash = mgf1_hash

    def encrypt(self, plaintext: str, key: KeyWithType) -> RSAOAEPEncryptedValue:
        self._check_key(key)
        ciphertext = RsaOaepCipher.encrypt(
            key.key, plaintext.encode("utf-8"), self._oaep_hash, self._mgf1_hash
        )
        return RSAOAEPEncryptedValue(
            ciphertext=ciphertext, oaep_hash=self._oaep_hash, mgf1_hash=self._mgf1_hash
        )


_ENCRYPTERS: Dict[AlgorithmType, Encrypter] = {
    AlgorithmType.AES: AESGCMEncrypter(),
    AlgorithmType.RSA: RSAOAEPEncrypter(),
}


def encrypter_for(algorithm: AlgorithmType) -> Encrypter:
    """Return the encrypter for an algorithm."""
    try:
        return _ENCRYPTERS[algorithm]
    except KeyError:
        raise UnknownAlgorithmError(f"No encrypter for algorithm: {algorithm}")
