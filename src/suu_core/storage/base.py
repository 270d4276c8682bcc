"""Abstract base class for secret store backends.

Backends are discovered via setuptools entry points:
    [project.entry-points."suu.secret_stores"]
    my_store = "my_package:MySecretStore"

Values are opaque strings; ``suu_core`` stores JSON-encoded
``SecretEntry`` objects under keys such as ``battle_secret_42``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class SecretStore(ABC):
    """Key-value storage for commit secrets that outlives the process."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if ``key`` is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; deleting a missing key is not an error."""

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
