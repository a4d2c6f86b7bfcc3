"""User entity, storage and service layered in clean-architecture style."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass


class UserNotFoundError(LookupError):
    """Raised when no user has the requested id."""

    def __init__(self, message: str = "user not found") -> None:
        super().__init__(message)


class InvalidAgeError(ValueError):
    """Raised when a user is created with an age that is not positive."""

    def __init__(self, message: str = "age must be positive") -> None:
        super().__init__(message)


@dataclass
class User:
    """A domain entity with no dependencies on other layers."""

    id: str
    name: str
    email: str
    age: int


def new_user(user_id: str, name: str, email: str, age: int) -> User:
    """Create a user, rejecting an age that is zero or negative."""
    if age <= 0:
        raise InvalidAgeError()
    return User(id=user_id, name=name, email=email, age=age)


class InMemoryUserRepo:
    """Keeps users in a dictionary guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}

    def save(self, user: User) -> None:
        """Store a user, replacing any user with the same id."""
        with self._lock:
            self._users[user.id] = user

    def get_by_id(self, user_id: str) -> User:
        """Return the user with this id or raise UserNotFoundError."""
        with self._lock:
            try:
                return self._users[user_id]
            except KeyError:
                raise UserNotFoundError() from None


class UserService:
    """Business logic for registering and looking up users."""

    def __init__(self, repo: InMemoryUserRepo) -> None:
        self.repo = repo

    def register_user(self, user_id: str, name: str, email: str, age: int) -> None:
        """Validate and store a new user."""
        self.repo.save(new_user(user_id, name, email, age))

    def get_user(self, user_id: str) -> User:
        """Return a stored user; raises UserNotFoundError if absent."""
        return self.repo.get_by_id(user_id)


def main(argv: Sequence[str] | None = None) -> int:
    """Register a sample user and print it back."""
    service = UserService(InMemoryUserRepo())

    print("Registering user...")
    try:
        service.register_user("1", "Alice", "alice@example.com", 30)
        user = service.get_user("1")
    except (InvalidAgeError, UserNotFoundError) as err:
        print(err)
        return 1

    print(f"User found: {user}")
    return 0