from fastapi import Depends, HTTPException, Request
from pymongo.database import Database

from adapter.mongodb.deposit_repository import MongoDepositRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.deposit_repository import DepositRepository
from port.user_repository import UserRepository


def get_db(request: Request) -> Database:
    """Get MongoDB database from the app's connection handle, raising 503 if unavailable."""
    connection = getattr(request.app.state, 'mongo', None)
    db = connection.get_database() if connection is not None else None
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_user_repo(db: Database = Depends(get_db)) -> UserRepository:
    return MongoUserRepository(db)


def get_deposit_repo(db: Database = Depends(get_db)) -> DepositRepository:
    return MongoDepositRepository(db)
