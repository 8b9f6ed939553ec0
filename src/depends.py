from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.access_token_signer import JwtAccessTokenSigner
from src.adapter.services.mailer import LoggingMailer
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.access_token_signer import IAccessTokenSigner
from src.app.services.auth_settings import AuthSettings
from src.app.services.mailer import IMailer
from src.app.services.password_hasher import IPasswordHasher

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings.from_config(ApplicationConfig)


@lru_cache
def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher(rounds=get_auth_settings().bcrypt_rounds)


@lru_cache
def get_token_signer() -> IAccessTokenSigner:
    settings = get_auth_settings()
    return JwtAccessTokenSigner(settings.jwt_secret, settings.access_token_ttl)


@lru_cache
def get_mailer() -> IMailer:
    return LoggingMailer(echo_codes=get_auth_settings().dev_mailer_echo)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    token_signer: IAccessTokenSigner = Depends(get_token_signer),
) -> dict:
    """
    Dependency to extract and verify the access token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded token payload containing user_id and role

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    payload = token_signer.verify(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
