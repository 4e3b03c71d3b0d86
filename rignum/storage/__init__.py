"""Storage layer: pooled PostgreSQL access."""

from rignum.storage.database import Database

__all__ = ["Database"]
