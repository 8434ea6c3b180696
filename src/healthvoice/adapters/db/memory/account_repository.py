"""
In-memory implementation of AccountRepository.
"""

from typing import Dict, List, Optional

from ....application.ports.repositories.account_repo import AccountRepository
from ....domain.entities.user import User
from ....domain.errors import DuplicateAccountError


class InMemoryAccountRepository(AccountRepository):
    """Accounts keyed by normalized email."""

    def __init__(self) -> None:
        self._by_email: Dict[str, User] = {}

    async def save(self, user: User) -> User:
        existing = self._by_email.get(user.email)
        if existing is not None and existing.user_id != user.user_id:
            raise DuplicateAccountError(user.email)
        self._by_email[user.email] = user
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(email.strip().lower())

    async def find_by_id(self, user_id: str) -> Optional[User]:
        for user in self._by_email.values():
            if user.user_id == user_id:
                return user
        return None

    async def find_all(self) -> List[User]:
        return list(self._by_email.values())
