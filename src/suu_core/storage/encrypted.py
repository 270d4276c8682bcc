"""Secret store encrypted at rest with Fernet (AES-128-CBC + HMAC).

The Fernet key lives in its own file, created with owner-only
permissions on first use.  Losing the key file makes every stored secret
unrecoverable, which leaves any outstanding commitment orphaned.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken

from suu_core.storage.secret_store import JsonFileSecretStore, write_private

logger = logging.getLogger(__name__)


def load_or_generate_key(path: str | Path) -> bytes:
    """Load a Fernet key from ``path``, generating and saving one if missing."""
    path = Path(path)
    if path.exists():
        return path.read_bytes().strip()
    key = Fernet.generate_key()
    write_private(path, key)
    logger.info("Generated new secret store key at %s", path)
    return key


class EncryptedFileSecretStore(JsonFileSecretStore):
    """A ``JsonFileSecretStore`` whose whole payload is a Fernet token."""

    def __init__(
        self,
        path: str | Path,
        key_path: str | Path | None = None,
        key: bytes | None = None,
    ) -> None:
        super().__init__(path)
        if key is None:
            key_path = Path(key_path) if key_path is not None else self.path.with_suffix(".key")
            key = load_or_generate_key(key_path)
        self._fernet = Fernet(key)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        token = self.path.read_bytes()
        if not token.strip():
            return {}
        try:
            plaintext = self._fernet.decrypt(token)
        except InvalidToken as exc:
            msg = f"Secret store {self.path} cannot be decrypted with this key"
            raise ValueError(msg) from exc
        data = json.loads(plaintext)
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        token = self._fernet.encrypt(json.dumps(data, sort_keys=True).encode("utf-8"))
        write_private(self.path, token)
