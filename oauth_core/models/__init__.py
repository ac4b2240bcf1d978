"""Entities and the process-wide DBStorage instance."""
from oauth_core.models.db_storage import DBStorage

storage = DBStorage()
storage.reload()
