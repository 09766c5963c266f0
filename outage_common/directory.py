"""
User directory contract.

The host application owns user accounts; the outage domain only needs to
list site admins and look up mailing-list recipients by id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class UserAccount:
    """A user account as seen by the outage domain."""

    id: int
    email: str
    name: str | None = None
    is_admin: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserAccount":
        """Create an account from dictionary format."""
        return cls(
            id=int(data["id"]),
            email=data["email"],
            name=data.get("name"),
            is_admin=bool(data.get("is_admin", False)),
        )


class AdminDirectory(ABC):
    """
    Abstract base class for user lookups.

    Implementations wrap whatever user store the host application has.
    """

    @abstractmethod
    def list_admins(self) -> list[UserAccount]:
        """
        List all site administrators.

        Returns:
            Admin accounts, in directory order
        """
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> UserAccount | None:
        """
        Retrieve a user by id.

        Args:
            user_id: Id of the user to retrieve

        Returns:
            UserAccount if found, None otherwise
        """
        pass


class StaticDirectory(AdminDirectory):
    """In-memory directory backed by a fixed list of accounts."""

    def __init__(self, users: list[UserAccount] | None = None):
        self._users = {user.id: user for user in users or []}

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> "StaticDirectory":
        """Build a directory from a list of user dicts (e.g. loaded from JSON)."""
        return cls([UserAccount.from_dict(record) for record in records])

    def list_admins(self) -> list[UserAccount]:
        return [user for user in self._users.values() if user.is_admin]

    def get_user(self, user_id: int) -> UserAccount | None:
        return self._users.get(user_id)
