# medicamp_api/database/mongo_helper.py
"""
MongoDB connection helpers with retry logic and transaction support
"""
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError
from pymongo.server_api import ServerApi

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_mongo_client(mongo_uri: str, max_retries: int = 3, retry_delay: int = 2) -> Optional[MongoClient]:
    """
    Create a MongoDB client pinned to the Stable API and verify it with a ping.

    Args:
        mongo_uri: MongoDB connection URI
        max_retries: Maximum number of connection attempts
        retry_delay: Initial delay between retries (exponential backoff)

    Returns:
        MongoClient instance or None if every attempt failed
    """
    connection_params = {
        'serverSelectionTimeoutMS': 30000,
        'connectTimeoutMS': 30000,
        'socketTimeoutMS': 30000,
        'maxPoolSize': 10,
        'retryWrites': True,
        'appName': 'MediCamp-API',
        'server_api': ServerApi('1', strict=True, deprecation_errors=True),
    }

    for attempt in range(max_retries):
        try:
            logger.info(f"🔄 MongoDB connection attempt {attempt + 1}/{max_retries}")
            client = MongoClient(mongo_uri, **connection_params)
            client.admin.command('ping')
            logger.info(f"✅ MongoDB connection successful on attempt {attempt + 1}")
            return client

        except ServerSelectionTimeoutError as e:
            logger.warning(f"⚠️ MongoDB server selection timeout (attempt {attempt + 1}): {str(e)[:200]}...")

        except OperationFailure as e:
            logger.error(f"❌ MongoDB authentication/operation failed (attempt {attempt + 1}): {str(e)[:200]}...")

        if attempt < max_retries - 1:
            wait_time = retry_delay * (2 ** attempt)
            logger.info(f"🔄 Retrying in {wait_time} seconds...")
            time.sleep(wait_time)
        else:
            logger.error("❌ All MongoDB connection attempts failed")

    return None


def test_mongo_connection(client: MongoClient, db_name: str) -> bool:
    """Ping the server and list collections of `db_name`"""
    try:
        client.admin.command('ping')
        client[db_name].list_collection_names()
        logger.info(f"✅ MongoDB connection and database '{db_name}' access verified")
        return True
    except Exception as e:
        logger.error(f"❌ MongoDB connection test failed: {str(e)[:200]}...")
        return False


@contextmanager
def optional_session(client: Any, enabled: bool) -> Iterator[Optional[ClientSession]]:
    """Yield a client session when transactions are enabled, else None"""
    if not enabled:
        yield None
        return
    with client.start_session() as session:
        yield session


def run_in_transaction(client: Any, enabled: bool, callback: Callable[[Optional[ClientSession]], T]) -> T:
    """
    Run `callback` inside a multi-document transaction.

    With transactions disabled the callback runs once with session=None and the
    caller is responsible for compensating partial writes.
    """
    with optional_session(client, enabled) as session:
        if session is None:
            return callback(None)
        return session.with_transaction(callback)
