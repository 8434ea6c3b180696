"""
Account endpoints: login and signup.
"""

from fastapi import APIRouter, Request, status

from ..deps import AccountRepositoryDep, SettingsDep
from ..errors import UnauthorizedError
from ..schemas.auth import LoginRequest, SignupRequest, UserOut
from ..schemas.common import ApiResponse
from ..utils.responses import ok
from ...application.use_cases.authenticate import (
    LoginRequest as LoginCommand,
    LoginUseCase,
    SignupRequest as SignupCommand,
    SignupUseCase,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[UserOut])
async def login(request: Request, body: LoginRequest, accounts: AccountRepositoryDep):
    user = await LoginUseCase(accounts).execute(LoginCommand(body.email, body.password))
    if user is None:
        raise UnauthorizedError("Invalid email or password")
    return ok(request, data=UserOut.from_domain(user), message="Logged in")


@router.post(
    "/signup", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED
)
async def signup(
    request: Request, body: SignupRequest, accounts: AccountRepositoryDep, settings: SettingsDep
):
    use_case = SignupUseCase(accounts, bcrypt_rounds=settings.security.bcrypt_rounds)
    user = await use_case.execute(
        SignupCommand(name=body.name, email=body.email, password=body.password, role=body.role)
    )
    return ok(request, data=UserOut.from_domain(user), message="Account created")
