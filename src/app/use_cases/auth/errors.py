"""
Authentication error kinds.

Codes are stable and mapped to HTTP statuses by the API layer.
"""

from src.domain.result import Error

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")
DUPLICATE_EMAIL = Error("DUPLICATE_EMAIL", "Email already registered")
ACCOUNT_LOCKED = Error(
    "ACCOUNT_LOCKED", "Account is temporarily locked after too many failed logins"
)
ACCOUNT_BANNED = Error("ACCOUNT_BANNED", "Account is banned")
EMAIL_NOT_VERIFIED = Error("EMAIL_NOT_VERIFIED", "Email must be verified before login")
CODE_INVALID = Error("CODE_INVALID", "Invalid or expired verification code")
TOO_MANY_ATTEMPTS = Error(
    "TOO_MANY_ATTEMPTS", "Too many invalid verification attempts, request a new code"
)
RESEND_TOO_SOON = Error(
    "RESEND_TOO_SOON", "Please wait before requesting a new verification code"
)
INVALID_REFRESH_TOKEN = Error(
    "INVALID_REFRESH_TOKEN", "Refresh token is invalid or expired"
)
REFRESH_TOKEN_REUSED = Error("REFRESH_TOKEN_REUSED", "Refresh token reuse detected")
USER_NOT_FOUND = Error("USER_NOT_FOUND", "User not found")
INTERNAL = Error("INTERNAL", "Internal server error")
