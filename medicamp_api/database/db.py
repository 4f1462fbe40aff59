# medicamp_api/database/db.py
import logging
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from ..config import MediCampSettings, get_settings
from .mongo_helper import create_mongo_client, test_mongo_connection

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Process-wide MongoDB connection, opened lazily on first use"""

    _instance = None
    _db: Optional[Database] = None

    def __new__(cls, settings: Optional[MediCampSettings] = None):
        if cls._instance is None:
            cls._instance = super(DatabaseConnection, cls).__new__(cls)
        return cls._instance

    def __init__(self, settings: Optional[MediCampSettings] = None):
        if self._db is not None:
            return

        self.settings = settings or get_settings()
        mongo_uri = self.settings.MONGODB_URI
        db_name = self.settings.DATABASE_NAME

        logger.info("🔄 Initializing MongoDB connection for MediCamp API...")
        self.client = create_mongo_client(mongo_uri, max_retries=self.settings.MONGODB_CONNECT_RETRIES)

        if self.client is None:
            logger.error("❌ Failed to create MongoDB client after multiple attempts")
            raise ConnectionError("Unable to connect to MongoDB")

        if not test_mongo_connection(self.client, db_name):
            logger.error(f"❌ Failed to access database '{db_name}'")
            raise ConnectionError(f"Unable to access database '{db_name}'")

        DatabaseConnection._db = self.client[db_name]
        logger.info(f"✅ MongoDB connection established successfully for database '{db_name}'")

        self._create_indexes()

    def get_client(self) -> MongoClient:
        return self.client

    def close_connection(self):
        """Close the client and forget the singleton so the next use reconnects"""
        if getattr(self, "client", None):
            self.client.close()
            logger.info("🔒 MongoDB connection closed")
        DatabaseConnection._db = None
        DatabaseConnection._instance = None

    def _create_indexes(self):
        """Create the indexes the reconciliation flow relies on"""
        # Users
        self._db.users.create_index("email", unique=True)

        # Camps
        self._db.camps.create_index("email")
        self._db.camps.create_index([("participantCount", DESCENDING)])

        # Registrations: one per participant and camp
        self._db.registered_camps.create_index(
            [("participantEmail", ASCENDING), ("campId", ASCENDING)], unique=True
        )
        self._db.registered_camps.create_index([("participantEmail", ASCENDING), ("createdAt", ASCENDING)])

        # Payments: one per registration
        self._db.payments.create_index("registrationId", unique=True)
        self._db.payments.create_index([("participantEmail", ASCENDING), ("campId", ASCENDING)])

    @property
    def db(self) -> Database:
        return self._db


def get_database() -> Database:
    """Get database instance"""
    return DatabaseConnection().db
