"""Encryption of local data with a per-user master key.

Encrypted values are base64 strings with this layout::

    +-----------+------------+-----------+---------------------+
    | salt      | nonce      | auth tag  | ciphertext          |
    | 64 bytes  | 16 bytes   | 16 bytes  | N - 96 bytes        |
    +-----------+------------+-----------+---------------------+

A fresh AES-256-GCM key is derived from the master key and the salt with
scrypt for every call. Persisting the result is the caller's job.
"""
from __future__ import annotations
import base64
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .platform import DecryptionError

logger = logging.getLogger(__name__)

MASTER_KEY_ENV = "IDCFG_MASTER_KEY"
MASTER_KEY_PATH_ENV = "IDCFG_MASTER_KEY_PATH"
DEFAULT_MASTER_KEY_PATH = Path.home() / ".idcfg" / "masterkey.key"

SALT_LENGTH = 64
NONCE_LENGTH = 16
TAG_LENGTH = 16
KEY_LENGTH = 32
HEADER_LENGTH = SALT_LENGTH + NONCE_LENGTH + TAG_LENGTH


class DataProtection:
    """Encrypt and decrypt JSON-serialisable values.

    The instance only remembers where the master key lives; the key itself is
    read on every call and never stored on the object.
    """

    def __init__(self, path_to_master_key: Optional[str] = None):
        self.path_to_master_key = path_to_master_key

    @classmethod
    def from_settings(cls, config) -> "DataProtection":
        """Use the master key file named by a PlatformConfig."""
        return cls(config.master_key_path)

    @property
    def master_key_path(self) -> Path:
        configured = self.path_to_master_key or os.environ.get(MASTER_KEY_PATH_ENV)
        return Path(configured).expanduser() if configured else DEFAULT_MASTER_KEY_PATH

    def _read_master_key(self) -> bytes:
        """Master key from the environment, else from file (created on first use)."""
        env_key = os.environ.get(MASTER_KEY_ENV)
        if env_key:
            return env_key.encode("utf-8")
        path = self.master_key_path
        if not path.exists():
            logger.info("Generating new master key at %s", path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(base64.b64encode(os.urandom(KEY_LENGTH)).decode("ascii"))
            path.chmod(0o600)
        return path.read_text().encode("utf-8")

    @staticmethod
    def _derive_key(master_key: bytes, salt: bytes) -> bytes:
        return Scrypt(salt=salt, length=KEY_LENGTH, n=2 ** 14, r=8, p=1).derive(master_key)

    def encrypt(self, data: Any) -> str:
        salt = os.urandom(SALT_LENGTH)
        nonce = os.urandom(NONCE_LENGTH)
        key = self._derive_key(self._read_master_key(), salt)
        # AESGCM appends the tag to the ciphertext
        sealed = AESGCM(key).encrypt(nonce, json.dumps(data).encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return base64.b64encode(salt + nonce + tag + ciphertext).decode("ascii")

    def decrypt(self, data: str) -> Any:
        """Decrypt a value produced by encrypt().

        Raises:
            DecryptionError: Malformed input, wrong master key or tampered data
        """
        try:
            raw = base64.b64decode(data, validate=True)
        except (ValueError, TypeError) as exc:
            raise DecryptionError(f"Encrypted data is not valid base64: {exc}") from exc
        if len(raw) < HEADER_LENGTH:
            raise DecryptionError("Encrypted data is too short")

        salt = raw[:SALT_LENGTH]
        nonce = raw[SALT_LENGTH:SALT_LENGTH + NONCE_LENGTH]
        tag = raw[SALT_LENGTH + NONCE_LENGTH:HEADER_LENGTH]
        ciphertext = raw[HEADER_LENGTH:]
        key = self._derive_key(self._read_master_key(), salt)
        try:
            plaintext = AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            raise DecryptionError("Unable to decrypt data: authentication failed") from exc
        return json.loads(plaintext.decode("utf-8"))
