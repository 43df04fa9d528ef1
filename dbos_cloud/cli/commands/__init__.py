"""CLI command modules.

Command Groups:
- db: Cloud Postgres instance management
"""

from .database import db_app

__all__ = ["db_app"]
