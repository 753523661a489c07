"""Concrete document store implementations."""

from docstudio.strategies.stores.local import LocalStore
from docstudio.strategies.stores.vault import VaultClient, VaultStore

__all__ = [
    "LocalStore",
    "VaultClient",
    "VaultStore",
]
