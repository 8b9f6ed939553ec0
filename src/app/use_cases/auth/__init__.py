"""
Authentication Use Cases

Registration, login, refresh rotation, logout and email verification.
"""

from .signup_use_case import SignupUseCase
from .signup_dto import SignupCommand, SignupResponse
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .request_verification_code_use_case import RequestVerificationCodeUseCase
from .confirm_email_use_case import ConfirmEmailUseCase
from .dtos import (
    ConfirmEmailResponse,
    LoginResponse,
    RefreshTokenResponse,
    UserInfo,
    VerificationRequestResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RequestVerificationCodeUseCase",
    "ConfirmEmailUseCase",
    # DTOs - Commands
    "SignupCommand",
    # DTOs - Responses
    "SignupResponse",
    "LoginResponse",
    "RefreshTokenResponse",
    "VerificationRequestResponse",
    "ConfirmEmailResponse",
    # DTOs - Nested Models
    "UserInfo",
]
