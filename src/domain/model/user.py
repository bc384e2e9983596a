from dataclasses import dataclass
from datetime import datetime

from bson import ObjectId

# Wire keys a partial update may set, mapped to User attributes.
UPDATABLE_FIELDS = {
    'email': 'email',
    'firstName': 'first_name',
    'lastName': 'last_name',
    'password': 'password',
}


@dataclass
class User:
    """Domain model representing a user.

    ``password`` always holds a bcrypt hash, never the plaintext.
    """
    id: str
    email: str
    password: str
    first_name: str
    last_name: str
    join_date: datetime


def is_valid_user_id(value: str) -> bool:
    """Return True if value is the 24-character hex form of an ObjectId."""
    return isinstance(value, str) and ObjectId.is_valid(value)


def build_user(
    user_id: str,
    email,
    password,
    first_name,
    last_name,
    join_date,
) -> User | None:
    """Build a User from stored values, or None if they don't fit the model.

    A null text field reads as empty; any other non-string value, or a
    join date that is not a datetime, makes the record undecodable.
    """
    texts = []
    for value in (email, password, first_name, last_name):
        if value is None:
            value = ''
        if not isinstance(value, str):
            return None
        texts.append(value)
    if not isinstance(join_date, datetime):
        return None
    return User(str(user_id), *texts, join_date)
