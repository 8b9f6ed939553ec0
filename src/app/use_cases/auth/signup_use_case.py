import logging

from src.app.repositories.user_repository import DuplicateEmailError, normalize_email
from src.app.services.auth_settings import AuthSettings
from src.app.services.mailer import IMailer
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_hasher import TokenHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import StudioStatus, User, UserRole
from src.domain.result import Result, Return
from . import errors
from .dtos import UserInfo
from .signup_dto import SignupCommand, SignupResponse
from .verification import deliver_verification_code, issue_verification_code

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (validated business intent)
    - Output: Result[SignupResponse] (structured response)

    Business Logic:
    1. Optimistic check that the email is free
    2. Hash password with bcrypt
    3. Create User with email_verified=False (studio owners start pending)
    4. A lost uniqueness race still maps to DUPLICATE_EMAIL
    5. Issue the first verification code
    6. Commit atomically, then mail the code
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: IPasswordHasher,
        mailer: IMailer,
        settings: AuthSettings,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.mailer = mailer
        self.settings = settings
        self.code_hasher = TokenHasher(settings.verification_code_pepper)

    async def execute(self, command: SignupCommand) -> Result[SignupResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with validated email, password, name, role

        Returns:
            Result[SignupResponse] with the created user
            or Error(DUPLICATE_EMAIL) if the email is taken
        """
        email = normalize_email(command.email)

        async with self.uow:
            if await self.uow.users.exists_by_email(email):
                return Return.err(errors.DUPLICATE_EMAIL)

            user = User(
                email=email,
                password_hash=self.password_hasher.hash(command.password),
                name=command.name,
                role=command.role,
                studio_status=(
                    StudioStatus.pending
                    if command.role == UserRole.studio_owner
                    else None
                ),
                email_verified=False,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateEmailError:
                logger.info("Signup lost uniqueness race", extra={"email": email})
                return Return.err(errors.DUPLICATE_EMAIL)

            _, raw_code = await issue_verification_code(
                self.uow, user, self.code_hasher, self.settings, utc_now()
            )

            await self.uow.commit()

            logger.info(
                "User registered", extra={"user_id": user.id, "role": user.role.value}
            )
            response = SignupResponse(user=UserInfo.from_user(user))

            await deliver_verification_code(self.mailer, user.email, raw_code)

            return Return.ok(response)
