"""
Content store boundary and the bundled JSON file store.
"""

from .base import ContentStore, StoreError
from .json_store import JsonFileStore

__all__ = ["ContentStore", "StoreError", "JsonFileStore"]
