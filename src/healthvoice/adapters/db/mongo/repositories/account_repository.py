"""
MongoDB implementation of AccountRepository.
"""

from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from healthvoice.application.ports.repositories.account_repo import AccountRepository
from healthvoice.domain.entities.user import User
from healthvoice.domain.errors import DuplicateAccountError

from ..models.account_m import AccountMongo


class MongoAccountRepository(AccountRepository):
    """MongoDB implementation of AccountRepository."""

    async def save(self, user: User) -> User:
        existing = await AccountMongo.find_one(AccountMongo.email == user.email)
        if existing is not None:
            if existing.user_id != user.user_id:
                raise DuplicateAccountError(user.email)
            existing.name = user.name
            existing.role = user.role.value
            existing.password_hash = user.password_hash
            await existing.save()
            return user

        try:
            await AccountMongo(
                user_id=user.user_id,
                name=user.name,
                email=user.email,
                role=user.role.value,
                password_hash=user.password_hash,
                created_at=user.created_at,
            ).insert()
        except DuplicateKeyError:
            raise DuplicateAccountError(user.email)
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        doc = await AccountMongo.find_one(AccountMongo.email == email.strip().lower())
        return self._mongo_to_domain(doc) if doc else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        doc = await AccountMongo.find_one(AccountMongo.user_id == user_id)
        return self._mongo_to_domain(doc) if doc else None

    async def find_all(self) -> List[User]:
        docs = await AccountMongo.find().to_list()
        return [self._mongo_to_domain(d) for d in docs]

    def _mongo_to_domain(self, doc: AccountMongo) -> User:
        return User(
            user_id=doc.user_id,
            name=doc.name,
            email=doc.email,
            role=doc.role,
            password_hash=doc.password_hash,
            created_at=doc.created_at,
        )
