"""
Database package for Release Control Tower.
"""

from .base import Base, Database, get_database_url, get_db
from .models import AppVersionModel
from .store import ReleaseStore

__all__ = [
    "Base",
    "Database",
    "get_database_url",
    "get_db",
    "AppVersionModel",
    "ReleaseStore",
]
