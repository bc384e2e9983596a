from typing import Any, Protocol

from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> User | None:
        """Create a new user with a fresh id and join date. Return User or None if creation failed."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update_fields(self, user_id: str, fields: dict[str, Any]) -> bool:
        """Set the given wire-keyed fields on a user.

        Return True if the store accepted the write. Whether a user matched
        the id is not checked.
        """
        ...

    def delete(self, user_id: str) -> bool:
        """Delete a user by ID. Return True if the store accepted the delete, matched or not."""
        ...
