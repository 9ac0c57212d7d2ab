"""
Data access layer.
"""

from portal.repositories.base import BaseRepository
from portal.repositories.record_store import RecordStore, SqlAlchemyRecordStore

__all__ = ["BaseRepository", "RecordStore", "SqlAlchemyRecordStore"]
