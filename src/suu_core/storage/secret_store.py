"""In-memory and plain JSON file secret stores."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterator

from suu_core.storage.base import SecretStore

logger = logging.getLogger(__name__)


def write_private(path: Path, payload: bytes) -> None:
    """Atomically replace ``path`` with ``payload``, owner read/write only.

    The temp file is created with mode 0o600, so the payload is never
    readable by others, not even between the write and the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.unlink(missing_ok=True)
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(payload)
    os.replace(tmp, path)


class InMemorySecretStore(SecretStore):
    """Process-local store. Secrets are lost on exit; meant for tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileSecretStore(SecretStore):
    """Stores all entries in a single JSON object on disk.

    Every write replaces the file atomically (write to a sibling temp file,
    then ``os.replace``) and restricts it to the owner.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            msg = f"Secret store {self.path} does not contain a JSON object"
            raise ValueError(msg)
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        write_private(self.path, json.dumps(data, sort_keys=True, indent=2).encode("utf-8"))

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        logger.debug("Stored %s in %s", key, self.path)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
            logger.debug("Removed %s from %s", key, self.path)

    def keys(self) -> Iterator[str]:
        return iter(list(self._read()))
