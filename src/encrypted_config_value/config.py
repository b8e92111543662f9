"""
Key loading and decryption of encrypted values embedded in config text.

Key sources, in order:
1. ENCRYPTED_CONFIG_VALUE_KEY: the key string itself ("aes:...", "rsa-priv:...")
2. ENCRYPTED_CONFIG_VALUE_KEY_PATH: path to a file containing the key string

Both may be set in the process environment or in a .env file; the process
environment wins.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from .codec import new_encrypted_value
from .envelope import ENC_PREFIX
from .errors import ConfigError
from .keys import KeyWithType

ENV_KEY = "ENCRYPTED_CONFIG_VALUE_KEY"
ENV_KEY_PATH = "ENCRYPTED_CONFIG_VALUE_KEY_PATH"

# ${enc:<base64>} reference inside a larger config document
ENCRYPTED_VALUE_PATTERN = re.compile(r"\$\{(enc:[^}]*)\}")


def load_key(env_file: Optional[Union[str, Path]] = None) -> KeyWithType:
    """
    Load the decryption key from the environment.

    Args:
        env_file: Optional .env file to load first (default: search upward from the
            current working directory)

    Returns:
        Parsed KeyWithType

    Raises:
        ConfigError: If no key source is configured or the key file is unreadable
        InvalidKeyError: If the key string cannot be parsed
    """
    load_dotenv(env_file or find_dotenv(usecwd=True), override=False)

    key_str = os.environ.get(ENV_KEY)
    if key_str:
        logger.info(f"Loaded encrypted config value key from {ENV_KEY}")
        return KeyWithType.from_str(key_str)

    key_path = os.environ.get(ENV_KEY_PATH)
    if key_path:
        try:
            key_str = Path(key_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read key file {key_path}: {e}") from e
        logger.info(f"Loaded encrypted config value key from file {key_path}")
        return KeyWithType.from_str(key_str)

    raise ConfigError(f"{ENV_KEY} or {ENV_KEY_PATH} must be set in environment or .env file")


def contains_encrypted_values(text: str) -> bool:
    """Whether text contains at least one ${enc:...} reference."""
    return ENCRYPTED_VALUE_PATTERN.search(text) is not None


def decrypt_encrypted_values(text: str, key: KeyWithType) -> str:
    """
    Replace every ${enc:...} reference in text with its decrypted plaintext.

    Raises:
        EncryptedValueError: If any reference cannot be decoded or decrypted
    """
    return ENCRYPTED_VALUE_PATTERN.sub(
        lambda m: new_encrypted_value(m.group(1)).decrypt(key), text
    )


def decrypt_if_encrypted(value: str, key: KeyWithType) -> str:
    """
    Decrypt value if it is an "enc:" string; otherwise return it unchanged.

    Lets plaintext and encrypted values sit side by side in the same config.
    """
    if not value.startswith(ENC_PREFIX):
        return value
    return new_encrypted_value(value).decrypt(key)
