"""In-memory implementation of UserRepository for testing."""

from dataclasses import astuple, replace
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId

from domain.model.user import UPDATABLE_FIELDS, User, build_user


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        # Set to simulate the store rejecting writes.
        self.fail_writes = False

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> User | None:
        if self.fail_writes:
            return None

        now = datetime.now(timezone.utc)
        user = User(
            id=str(ObjectId()),
            email=email,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            join_date=now.replace(microsecond=now.microsecond // 1000 * 1000),
        )
        self.store[user.id] = replace(user)
        return user

    def update_fields(self, user_id: str, fields: dict[str, Any]) -> bool:
        if self.fail_writes:
            return False

        user = self.store.get(user_id)
        if user:
            for key, value in fields.items():
                setattr(user, UPDATABLE_FIELDS.get(key, key), value)
        return True

    def delete(self, user_id: str) -> bool:
        if self.fail_writes:
            return False

        self.store.pop(user_id, None)
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        # Decoded like a stored document, which also copies it
        return build_user(*astuple(user)) if user else None
