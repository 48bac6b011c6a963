"""
Persistence package: ORM models and the process-wide `storage` handle.

`storage` is created here once; api.create_app() configures its engine
from the active config and every blueprint imports it from this module.
"""
from models.db_storage import DBStorage

storage = DBStorage()
