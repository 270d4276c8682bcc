"""Secret store discovery and loading via setuptools entry points."""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import Any

from suu_core.errors import StoreNotFoundError
from suu_core.storage.base import SecretStore

SECRET_STORE_GROUP = "suu.secret_stores"


def load_secret_store_class(name: str, group: str = SECRET_STORE_GROUP) -> type[SecretStore]:
    """Load a secret store class by entry point name.

    Raises:
        StoreNotFoundError: If no backend is registered under ``name``.
        TypeError: If the entry point is not a ``SecretStore`` subclass.
    """
    for ep in entry_points().select(group=group):
        if ep.name == name:
            cls = ep.load()
            if not (isinstance(cls, type) and issubclass(cls, SecretStore)):
                msg = f"Secret store '{name}' in '{group}' is not a subclass of SecretStore"
                raise TypeError(msg)
            return cls

    msg = f"Secret store '{name}' not found in entry point group '{group}'"
    raise StoreNotFoundError(msg)


def open_secret_store(name: str, *args: Any, **kwargs: Any) -> SecretStore:
    """Load the ``name`` backend and instantiate it with the given arguments."""
    return load_secret_store_class(name)(*args, **kwargs)


def list_secret_stores(group: str = SECRET_STORE_GROUP) -> list[str]:
    """List all available secret store backend names."""
    return sorted(ep.name for ep in entry_points().select(group=group))
