"""
Signup Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- SignupCommand: Input to use case (validated business intent)
- SignupResponse: Output from use case (structured result)
"""

from pydantic import BaseModel

from src.domain.entities import UserRole
from .dtos import UserInfo


class SignupCommand(BaseModel):
    """
    Signup command - represents validated signup intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    email: str
    password: str
    name: str = ""
    role: UserRole = UserRole.client


class SignupResponse(BaseModel):
    """
    Signup response - structured output from use case

    No tokens are issued here: login stays closed until the email is verified.
    """

    user: UserInfo
    verification_required: bool = True
