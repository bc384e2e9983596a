"""User service — create, read, update and delete business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import json
import os
from typing import Any

import bcrypt

from domain.model.errors import DomainError, NotFoundError, PasswordHashError, ValidationError
from domain.model.user import UPDATABLE_FIELDS, User, is_valid_user_id
from port.user_repository import UserRepository

DEFAULT_BCRYPT_ROUNDS = 10


def bcrypt_rounds_from_env() -> int:
    """bcrypt work factor from BCRYPT_ROUNDS, or DEFAULT_BCRYPT_ROUNDS when unset."""
    return int(os.getenv("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS))


BCRYPT_ROUNDS = bcrypt_rounds_from_env()


def hash_password(password: str) -> str:
    """Hash password using bcrypt.

    Raises:
        PasswordHashError: bcrypt rejected the input (e.g. longer than 72 bytes)
    """
    try:
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
    except ValueError as e:
        raise PasswordHashError("Error hashing password") from e


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def check_user_id(user_id: str) -> None:
    if not is_valid_user_id(user_id):
        raise ValidationError("Invalid ID")


def create_user(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None,
) -> User:
    """Create a new user.

    Returns the created User, carrying the hashed password.

    Raises:
        ValidationError: any of the four fields is empty
        PasswordHashError: hashing failed
        DomainError: the store rejected the insert
    """
    if not email or not password or not first_name or not last_name:
        raise ValidationError("All fields except ID and JoinDate are required")

    password_hash = hash_password(password)

    user = repo.create(
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
    )
    if not user:
        raise DomainError("Failed to create user")
    return user


def get_user(repo: UserRepository, user_id: str) -> User:
    """Look up a user by id.

    Raises:
        ValidationError: id is not a valid ObjectId
        NotFoundError: no user with that id
    """
    check_user_id(user_id)
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def filter_updates(updates: dict[str, Any]) -> dict[str, Any]:
    """Keep only updatable fields, re-hashing the password if present."""
    filtered = {}
    for key, value in updates.items():
        if key not in UPDATABLE_FIELDS:
            continue
        if key == "password":
            plain = value if isinstance(value, str) else json.dumps(value)
            filtered[key] = hash_password(plain)
        else:
            filtered[key] = value
    return filtered


def update_user(repo: UserRepository, user_id: str, updates: dict[str, Any]) -> None:
    """Apply a partial update to a user.

    Unknown keys are dropped. A missing user is not detected: the update
    succeeds without touching anything.

    Raises:
        ValidationError: invalid id, or no updatable field left after filtering
        PasswordHashError: re-hashing the new password failed
        DomainError: the store rejected the update
    """
    check_user_id(user_id)

    fields = filter_updates(updates)
    if not fields:
        raise ValidationError("No valid fields to update")

    if not repo.update_fields(user_id, fields):
        raise DomainError("Failed to update user")


def delete_user(repo: UserRepository, user_id: str) -> None:
    """Delete a user. Deleting a missing user also succeeds.

    Raises:
        ValidationError: id is not a valid ObjectId
        DomainError: the store rejected the delete
    """
    check_user_id(user_id)
    if not repo.delete(user_id):
        raise DomainError("Failed to delete user")
