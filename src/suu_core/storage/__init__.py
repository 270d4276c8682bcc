"""Persistent storage for commit secrets."""

from suu_core.storage.base import SecretStore
from suu_core.storage.encrypted import EncryptedFileSecretStore, load_or_generate_key
from suu_core.storage.loader import (
    SECRET_STORE_GROUP,
    list_secret_stores,
    load_secret_store_class,
    open_secret_store,
)
from suu_core.storage.secret_store import InMemorySecretStore, JsonFileSecretStore

__all__ = [
    "EncryptedFileSecretStore",
    "InMemorySecretStore",
    "JsonFileSecretStore",
    "SECRET_STORE_GROUP",
    "SecretStore",
    "list_secret_stores",
    "load_or_generate_key",
    "load_secret_store_class",
    "open_secret_store",
]
