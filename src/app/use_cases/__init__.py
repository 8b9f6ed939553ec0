"""
Use Cases

All use cases are organized into domain folders:
- auth/: Registration, login, refresh, logout, email verification
- users/: Current user profile

Import from subdirectories for better organization.
"""

from .auth import (
    SignupUseCase,
    SignupCommand,
    SignupResponse,
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    RequestVerificationCodeUseCase,
    ConfirmEmailUseCase,
)
from .users import GetCurrentUserUseCase

__all__ = [
    # Auth
    "SignupUseCase",
    "SignupCommand",
    "SignupResponse",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RequestVerificationCodeUseCase",
    "ConfirmEmailUseCase",
    # Users
    "GetCurrentUserUseCase",
]
