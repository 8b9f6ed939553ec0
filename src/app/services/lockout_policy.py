"""
Account lockout policy.

Pure state transitions over User.failed_login_attempts / User.locked_until.
Callers persist the user after any transition that reports a change.
"""

from datetime import datetime, timedelta

from src.domain.entities import User


class LockoutPolicy:
    def __init__(self, max_attempts: int, lock_duration: timedelta):
        self.max_attempts = max_attempts
        self.lock_duration = lock_duration

    def is_locked(self, user: User, now: datetime) -> bool:
        return user.locked_until is not None and user.locked_until > now

    def release_if_elapsed(self, user: User, now: datetime) -> bool:
        """Clear counters once a lock window has fully elapsed."""
        if user.locked_until is None or user.locked_until > now:
            return False
        user.locked_until = None
        user.failed_login_attempts = 0
        return True

    def register_failure(self, user: User, now: datetime) -> bool:
        """Count a wrong password. Returns True if the account is now locked."""
        user.failed_login_attempts += 1
        if user.failed_login_attempts >= self.max_attempts:
            user.locked_until = now + self.lock_duration
            return True
        return False

    def register_success(self, user: User) -> bool:
        if user.failed_login_attempts == 0 and user.locked_until is None:
            return False
        user.failed_login_attempts = 0
        user.locked_until = None
        return True
