# MediCamp database package
from .db import get_database, DatabaseConnection
from .mongo_helper import run_in_transaction

__all__ = ["get_database", "DatabaseConnection", "run_in_transaction"]
