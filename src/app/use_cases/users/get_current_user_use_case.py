"""
Get Current User Use Case

Loads the authenticated user's profile from access token claims.
"""

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import errors
from src.app.use_cases.auth.dtos import UserInfo
from src.domain.result import Result, Return


class GetCurrentUserUseCase:
    """
    Use case for loading the current user.

    Business Rules:
    - Access token payload provides user_id and role
    - User must exist
    - Banned users are refused even while their access token is still valid
    - Password hash is never returned
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: int) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(errors.USER_NOT_FOUND)

            if user.is_blocked:
                return Return.err(errors.ACCOUNT_BANNED)

            return Return.ok(UserInfo.from_user(user))
