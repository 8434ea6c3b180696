"""Login and signup use cases against the account store."""

import uuid
from typing import Optional

from ..ports.repositories.account_repo import AccountRepository
from ...core.utils.crypto_utils import DEFAULT_ROUNDS, hash_password, verify_password
from ...domain.entities.user import User
from ...domain.enums.triage import UserRole
from ...domain.errors import DuplicateAccountError


class LoginRequest:
    """Request for logging in."""
    def __init__(self, email: str, password: str):
        self.email = email
        self.password = password


class SignupRequest:
    """Request for creating an account."""
    def __init__(self, name: str, email: str, password: str, role: UserRole = UserRole.PATIENT):
        self.name = name
        self.email = email
        self.password = password
        self.role = role


class LoginUseCase:
    """Resolve credentials to an account.

    Unknown email and wrong password look the same to the caller: ``None``.
    """

    def __init__(self, account_repository: AccountRepository):
        self._account_repository = account_repository

    async def execute(self, request: LoginRequest) -> Optional[User]:
        user = await self._account_repository.find_by_email(request.email)
        if user is None:
            return None
        if not verify_password(request.password, user.password_hash):
            return None
        return user


class SignupUseCase:
    """Create an account; the email must not be registered yet."""

    def __init__(self, account_repository: AccountRepository, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self._account_repository = account_repository
        self._bcrypt_rounds = bcrypt_rounds

    async def execute(self, request: SignupRequest) -> User:
        if await self._account_repository.find_by_email(request.email):
            raise DuplicateAccountError(request.email)

        user = User(
            user_id=f"u{uuid.uuid4().hex[:12]}",
            name=request.name,
            email=request.email,
            role=UserRole(request.role),
            password_hash=hash_password(request.password, rounds=self._bcrypt_rounds),
        )
        return await self._account_repository.save(user)
