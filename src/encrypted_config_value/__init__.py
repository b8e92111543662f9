"""
Encrypted Config Value Library

Self-describing encrypted values for configuration files and environment
variables.

Overview
--------
An encrypted value is serialized as ``enc:<base64>``. The base64 payload is
a JSON document naming the algorithm that produced it, so a reader holding
the right key can decrypt any value without knowing in advance how it was
encrypted. Payloads that are not JSON are values written before the JSON
format existed; they still decrypt with the matching key.

Quick Start
-----------
```python
from encrypted_config_value import (
    AESGCMEncrypter,
    KeyWithType,
    new_encrypted_value,
)

key = KeyWithType.from_str("aes:...")

# Encrypt
serialized = AESGCMEncrypter().encrypt("hunter2", key).to_serializable()

# Decrypt
plaintext = new_encrypted_value(serialized).decrypt(key)
```

Modules
-------
- `codec`: ``enc:`` string decoding and algorithm dispatch
- `values`: AES, RSA and legacy encrypted value variants
- `keys`: Typed key strings (``aes:``, ``rsa-pub:``, ``rsa-priv:``)
- `encrypter`: Encryption side
- `crypto`: AES-256-GCM and RSA-OAEP primitives
- `config`: Key loading and ``${enc:...}`` substitution
- `errors`: Error types and exception classes
"""

__version__ = "0.1.0"

# =============================================================================
# Codec Exports
# =============================================================================

from .algorithm import AlgorithmType, HashAlgorithm
from .codec import must_new_encrypted_value, new_encrypted_value, to_serializable
from .envelope import ENC_PREFIX, is_json

# =============================================================================
# Value Exports
# =============================================================================

from .values import (
    AESGCMEncryptedValue,
    EncryptedValue,
    LegacyEncryptedValue,
    RSAOAEPEncryptedValue,
    TypedEncryptedValue,
)

# =============================================================================
# Key and Encrypter Exports
# =============================================================================

from .keys import KeyRole, KeyType, KeyWithType
from .encrypter import AESGCMEncrypter, Encrypter, RSAOAEPEncrypter, encrypter_for

# =============================================================================
# Config Exports
# =============================================================================

from .config import (
    ENV_KEY,
    ENV_KEY_PATH,
    contains_encrypted_values,
    decrypt_encrypted_values,
    decrypt_if_encrypted,
    load_key,
)

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    ConfigError,
    DecryptionError,
    EncryptedValueError,
    EncryptionError,
    EnvelopeFormatError,
    InvalidEncodingError,
    InvalidEnvelopeShapeError,
    InvalidKeyError,
    InvalidVariantShapeError,
    KeyAlgorithmMismatchError,
    MalformedEnvelopeError,
    SerializationError,
    UnknownAlgorithmError,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Codec
    "ENC_PREFIX",
    "AlgorithmType",
    "HashAlgorithm",
    "new_encrypted_value",
    "must_new_encrypted_value",
    "to_serializable",
    "is_json",
    # Values
    "EncryptedValue",
    "TypedEncryptedValue",
    "AESGCMEncryptedValue",
    "RSAOAEPEncryptedValue",
    "LegacyEncryptedValue",
    # Keys and encrypters
    "KeyRole",
    "KeyType",
    "KeyWithType",
    "Encrypter",
    "AESGCMEncrypter",
    "RSAOAEPEncrypter",
    "encrypter_for",
    # Config
    "ENV_KEY",
    "ENV_KEY_PATH",
    "load_key",
    "contains_encrypted_values",
    "decrypt_encrypted_values",
    "decrypt_if_encrypted",
    # Errors
    "EncryptedValueError",
    "EnvelopeFormatError",
    "MalformedEnvelopeError",
    "InvalidEncodingError",
    "InvalidEnvelopeShapeError",
    "InvalidVariantShapeError",
    "UnknownAlgorithmError",
    "KeyAlgorithmMismatchError",
    "DecryptionError",
    "EncryptionError",
    "SerializationError",
    "InvalidKeyError",
    "ConfigError",
]
