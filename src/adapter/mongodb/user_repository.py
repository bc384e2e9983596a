"""MongoDB implementation of UserRepository.

Documents keep the wire field names (``firstName``, ``lastName``,
``joinDate``) so partial updates can ``$set`` them directly. The id is an
ObjectId under ``_id`` and is exposed to the domain as its hex string.
"""

from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.user import User, build_user

logger = getLogger(__name__)


def _now() -> datetime:
    # BSON dates have millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def _to_domain(self, doc: dict) -> User | None:
        """Convert MongoDB document to User domain model.

        Returns None for a document whose fields don't decode into a User.
        """
        return build_user(
            user_id=doc['_id'],
            email=doc.get('email'),
            password=doc.get('password'),
            first_name=doc.get('firstName'),
            last_name=doc.get('lastName'),
            join_date=doc.get('joinDate'),
        )

    def _to_document(self, user: User) -> dict:
        """Convert User domain model to MongoDB document."""
        return {
            '_id': ObjectId(user.id),
            'email': user.email,
            'password': user.password,
            'firstName': user.first_name,
            'lastName': user.last_name,
            'joinDate': user.join_date,
        }

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> User | None:
        """Create a new user and return the User object."""
        user = User(
            id=str(ObjectId()),
            email=email,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            join_date=_now(),
        )
        try:
            self.collection.insert_one(self._to_document(user))
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            return None

        logger.info("User created", extra={"userId": user.id, "email": email})
        return user

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': ObjectId(user_id)})
            if not doc:
                return None
            user = self._to_domain(doc)
            if user is None:
                logger.warning("Stored user does not decode", extra={"userId": user_id})
            return user
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            return None

    def update_fields(self, user_id: str, fields: dict[str, Any]) -> bool:
        """Apply a $set of the given fields. Match count is not inspected."""
        try:
            result = self.collection.update_one(
                {'_id': ObjectId(user_id)},
                {'$set': fields}
            )
            logger.debug(
                "Updated user fields",
                extra={"userId": user_id, "fields": sorted(fields), "matched": result.matched_count},
            )
            return True
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            return False

    def delete(self, user_id: str) -> bool:
        """Delete a user by ID. Match count is not inspected."""
        try:
            result = self.collection.delete_one({'_id': ObjectId(user_id)})
            logger.debug("Deleted user", extra={"userId": user_id, "deleted": result.deleted_count})
            return True
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            return False
