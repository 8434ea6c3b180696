"""
Account repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.user import User


class AccountRepository(ABC):
    """Abstract repository for user accounts."""

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save an account."""
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find an account by (case-insensitive) email."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Find an account by ID."""
        pass

    @abstractmethod
    async def find_all(self) -> List[User]:
        pass
