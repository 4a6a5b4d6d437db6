"""Database adapters."""

from inkwell.adapters.db.app_db import AppDatabase
from inkwell.adapters.db.memory import InMemoryStore

__all__ = ["AppDatabase", "InMemoryStore"]
