"""Database models."""
from topik_practice.models.db.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]
