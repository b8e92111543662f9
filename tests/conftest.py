"""
Pytest configuration and fixtures for encrypted config value tests.
"""

from __future__ import annotations

import secrets

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from encrypted_config_value import KeyWithType


@pytest.fixture
def aes_key() -> KeyWithType:
    """Create a fresh AES-256 key."""
    return KeyWithType.from_aes_bytes(secrets.token_bytes(32))


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Generate one RSA key pair for the whole session (generation is slow)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def rsa_decrypt_key(rsa_private_key: rsa.RSAPrivateKey) -> KeyWithType:
    return KeyWithType.from_rsa_private_key(rsa_private_key)


@pytest.fixture
def rsa_encrypt_key(rsa_private_key: rsa.RSAPrivateKey) -> KeyWithType:
    return KeyWithType.from_rsa_public_key(rsa_private_key.public_key())


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    """Empty .env file, with key variables cleared from the process environment."""
    # setenv first so monkeypatch restores the original state, including
    # variables that load_dotenv() sets during the test
    for name in ("ENCRYPTED_CONFIG_VALUE_KEY", "ENCRYPTED_CONFIG_VALUE_KEY_PATH"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    path = tmp_path / ".env"
    path.write_text("")
    return path
