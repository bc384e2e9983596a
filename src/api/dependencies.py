from fastapi import Depends, HTTPException, Request
from pymongo.database import Database

from adapter.mongodb.user_repository import MongoUserRepository
from port.user_repository import UserRepository


def get_database(request: Request) -> Database:
    """Get the database handle opened at startup, raising 503 if absent."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_user_repo(db: Database = Depends(get_database)) -> UserRepository:
    return MongoUserRepository(db)
