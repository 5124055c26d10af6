# database.py
import logging
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

from config import (
    DATABASE_NAME,
    MESSAGES_COLLECTION,
    MONGO_MAX_POOL_SIZE,
    MONGO_TIMEOUT_MS,
    MONGODB_URI,
    USERS_COLLECTION,
)

logger = logging.getLogger(__name__)

# Fields never returned to clients when reading profiles
PUBLIC_PROJECTION = {"_id": 0, "hashed_password": 0}

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """Return the shared client, creating its connection pool on first use."""
    global _client
    if _client is None:
        logger.info("Connecting to MongoDB (pool size %d)", MONGO_MAX_POOL_SIZE)
        _client = MongoClient(
            MONGODB_URI,
            maxPoolSize=MONGO_MAX_POOL_SIZE,
            serverSelectionTimeoutMS=MONGO_TIMEOUT_MS,
        )
    return _client


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_db() -> Iterator[Database]:
    """
    FastAPI dependency to provide the app database to routes.
    Usage:
        def my_route(db: Database = Depends(get_db)):
            ...
    Connections are checked out of the client's pool per operation and
    returned to it when the operation finishes, so nothing outlives the request.
    """
    db = get_client()[DATABASE_NAME]
    try:
        yield db
    finally:
        logger.debug("Request scope for database %s closed", DATABASE_NAME)


def ping(db: Database) -> bool:
    db.command("ping")
    return True


# Generic helpers

def create_document(db: Database, collection: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert a document and return its store id as a string."""
    doc = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    result = db[collection].insert_one(doc)
    return str(result.inserted_id)


def get_documents(
    db: Database,
    collection: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    projection: Optional[Dict[str, int]] = None,
) -> List[Dict[str, Any]]:
    return list(db[collection].find(filter_dict or {}, projection))


# Users

def find_user(db: Database, user_id: str) -> Optional[Dict[str, Any]]:
    return db[USERS_COLLECTION].find_one({"user_id": user_id}, PUBLIC_PROJECTION)


def find_user_by_email(db: Database, email: str) -> Optional[Dict[str, Any]]:
    # Login needs the password hash, so no projection here
    return db[USERS_COLLECTION].find_one({"email": email})


def find_users_by_ids(db: Database, user_ids: List[str]) -> List[Dict[str, Any]]:
    """One query for all ids; result order follows the store, not the input."""
    return get_documents(db, USERS_COLLECTION, {"user_id": {"$in": user_ids}}, PUBLIC_PROJECTION)


def find_users_by_fields(db: Database, filter_dict: Dict[str, Any]) -> List[Dict[str, Any]]:
    return get_documents(db, USERS_COLLECTION, filter_dict, PUBLIC_PROJECTION)


def insert_user(db: Database, data: Union[BaseModel, Dict[str, Any]]) -> str:
    return create_document(db, USERS_COLLECTION, data)


def update_user(db: Database, user_id: str, fields: Dict[str, Any]):
    """$set the given fields on the user; returns the pymongo UpdateResult."""
    return db[USERS_COLLECTION].update_one({"user_id": user_id}, {"$set": fields})


def append_match(db: Database, owner_id: str, target_id: str):
    """
    Push {user_id: target_id} onto the owner's matches.
    There is no duplicate check: recording the same pair twice stores two entries.
    """
    result = db[USERS_COLLECTION].update_one(
        {"user_id": owner_id},
        {"$push": {"matches": {"user_id": target_id}}},
    )
    logger.info("Match %s -> %s recorded (modified=%d)", owner_id, target_id, result.modified_count)
    return result


# Messages

def find_messages(db: Database, from_user_id: str, to_user_id: str) -> List[Dict[str, Any]]:
    return get_documents(
        db,
        MESSAGES_COLLECTION,
        {"from_userId": from_user_id, "to_userId": to_user_id},
        {"_id": 0},
    )


def insert_message(db: Database, data: Union[BaseModel, Dict[str, Any]]) -> str:
    return create_document(db, MESSAGES_COLLECTION, data)
