from typing import Literal

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from src.api.error import ClientError, ServerError
from src.app.services.access_token_signer import IAccessTokenSigner
from src.app.services.auth_settings import AuthSettings
from src.app.services.mailer import IMailer
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    SignupCommand,
    SignupResponse,
    SignupUseCase,
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    RequestVerificationCodeUseCase,
    ConfirmEmailUseCase,
    LoginResponse,
    RefreshTokenResponse,
    VerificationRequestResponse,
    ConfirmEmailResponse,
)
from src.domain.entities import UserRole
from src.depends import (
    get_auth_settings,
    get_mailer,
    get_password_hasher,
    get_token_signer,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def client_metadata(request: Request) -> tuple[str | None, str | None]:
    user_agent = request.headers.get("user-agent")
    ip = request.client.host if request.client else None
    return user_agent, ip


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    API layer responsibility: HTTP validation and serialization.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (8-72 bytes)")
    name: str = Field("", max_length=255, description="Display name")
    role: Literal["client", "studio_owner"] = Field(
        "client", description="Account type"
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return value


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse
)
async def signup(
    request: SignupRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    mailer: IMailer = Depends(get_mailer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    User Signup

    Creates a client or studio-owner account and mails a verification code.
    No tokens are issued until the email is verified and the user logs in.

    Raises:
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 500 Internal Server Error: Server error
    """
    command = SignupCommand(
        email=request.email,
        password=request.password,
        name=request.name,
        role=UserRole(request.role),
    )

    use_case = SignupUseCase(uow, password_hasher, mailer, settings)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "DUPLICATE_EMAIL":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_signer: IAccessTokenSigner = Depends(get_token_signer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    User Login

    Authenticates user and returns an access token plus a refresh token
    rooting a new rotation family.

    Raises:
        - 401 Unauthorized: Invalid credentials (also for unknown email)
        - 403 Forbidden: Account banned or email not verified
        - 423 Locked: Too many failed attempts, account temporarily locked
        - 500 Internal Server Error: Server error
    """
    user_agent, ip = client_metadata(http_request)

    use_case = LoginUseCase(uow, password_hasher, token_signer, settings)
    result = await use_case.execute(request.email, request.password, user_agent, ip)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("ACCOUNT_BANNED", "EMAIL_NOT_VERIFIED"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "ACCOUNT_LOCKED":
            raise ClientError(error, status_code=status.HTTP_423_LOCKED)
        raise ServerError(error)

    return result.value


class RefreshRequest(BaseModel):
    """
    Refresh token HTTP request payload

    Validates incoming refresh request.
    """

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_signer: IAccessTokenSigner = Depends(get_token_signer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Refresh Access Token

    Exchanges a refresh token for a new access token and a new refresh token.
    The presented refresh token is consumed; presenting it again revokes the
    whole token family.

    Raises:
        - 401 Unauthorized: Invalid/expired token or reuse detected
        - 403 Forbidden: Account banned or email not verified
        - 500 Internal Server Error: Server error
    """
    user_agent, ip = client_metadata(http_request)

    use_case = RefreshTokenUseCase(uow, token_signer, settings)
    result = await use_case.execute(request.refresh_token, user_agent, ip)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_REFRESH_TOKEN", "REFRESH_TOKEN_REUSED"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("ACCOUNT_BANNED", "EMAIL_NOT_VERIFIED"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class LogoutRequest(BaseModel):
    """Logout HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: LogoutRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Logout

    Revokes the refresh token. Always succeeds, whether or not the token
    exists or was already revoked.
    """
    use_case = LogoutUseCase(uow, settings)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise ServerError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


class VerificationRequestRequest(BaseModel):
    """
    Verification code request HTTP payload
    """

    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/verify/request",
    status_code=status.HTTP_200_OK,
    response_model=VerificationRequestResponse,
)
async def request_verification_code(
    request: VerificationRequestRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: IMailer = Depends(get_mailer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Request Verification Code

    Mails a new 6 digit code.

    Security:
        - No email enumeration (same response for unknown/verified emails)
        - One live code per cooldown window

    Raises:
        - 429 Too Many Requests: Previous code sent too recently
        - 500 Internal Server Error: Server error
    """
    use_case = RequestVerificationCodeUseCase(uow, mailer, settings)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "RESEND_TOO_SOON":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class ConfirmEmailRequest(BaseModel):
    """
    Confirm email HTTP request payload
    """

    email: EmailStr = Field(..., description="User email address")
    code: str = Field(..., description="6 digit verification code")


@router.post(
    "/verify/confirm",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmEmailResponse,
)
async def confirm_email(
    request: ConfirmEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Confirm Email

    Consumes the verification code and marks the email as verified.

    Raises:
        - 400 Bad Request: Invalid, expired or already used code
        - 429 Too Many Requests: Code burned after too many wrong guesses
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmEmailUseCase(uow, settings)
    result = await use_case.execute(request.email, request.code)

    if result.is_err():
        error = result.error
        if error.code == "CODE_INVALID":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TOO_MANY_ATTEMPTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value
