"""
Immutable auth configuration.

Built once from ApplicationConfig and handed to every component that needs
secrets or TTLs, so no use case reads ambient global state.
"""

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, model_validator

DEFAULT_JWT_SECRET = "dev-secret-key-change-in-production"
DEFAULT_REFRESH_TOKEN_PEPPER = "change-me-refresh-pepper"
DEFAULT_VERIFICATION_CODE_PEPPER = "change-me-verification-pepper"

PROD_ENVIRONMENTS = ("prod", "production", "release")


class AuthSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    app_env: str = "dev"

    jwt_secret: str = DEFAULT_JWT_SECRET
    access_token_ttl: timedelta = timedelta(minutes=15)

    refresh_token_pepper: str = DEFAULT_REFRESH_TOKEN_PEPPER
    refresh_token_ttl: timedelta = timedelta(days=7)
    refresh_tokens_per_user: int = 10

    verification_code_pepper: str = DEFAULT_VERIFICATION_CODE_PEPPER
    verification_code_ttl: timedelta = timedelta(minutes=5)
    verification_resend_cooldown: timedelta = timedelta(seconds=60)
    verification_max_attempts: int = 5

    max_failed_logins: int = 5
    lockout_duration: timedelta = timedelta(minutes=15)

    bcrypt_rounds: int = 12

    dev_mailer_echo: bool = False

    @model_validator(mode="after")
    def check_values(self) -> "AuthSettings":
        durations = {
            "access_token_ttl": self.access_token_ttl,
            "refresh_token_ttl": self.refresh_token_ttl,
            "verification_code_ttl": self.verification_code_ttl,
            "verification_resend_cooldown": self.verification_resend_cooldown,
            "lockout_duration": self.lockout_duration,
        }
        for name, value in durations.items():
            if value <= timedelta(0):
                raise ValueError(f"{name} must be > 0")

        if self.max_failed_logins < 1:
            raise ValueError("max_failed_logins must be >= 1")
        if self.verification_max_attempts < 1:
            raise ValueError("verification_max_attempts must be >= 1")
        if self.refresh_tokens_per_user < 1:
            raise ValueError("refresh_tokens_per_user must be >= 1")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")

        if self.app_env.strip().lower() in PROD_ENVIRONMENTS:
            secrets = {
                "JWT_SECRET": (self.jwt_secret, DEFAULT_JWT_SECRET),
                "REFRESH_TOKEN_PEPPER": (
                    self.refresh_token_pepper,
                    DEFAULT_REFRESH_TOKEN_PEPPER,
                ),
                "VERIFICATION_CODE_PEPPER": (
                    self.verification_code_pepper,
                    DEFAULT_VERIFICATION_CODE_PEPPER,
                ),
            }
            for name, (value, default) in secrets.items():
                if not value.strip() or value.strip() == default:
                    raise ValueError(
                        f"in {self.app_env} {name} must be set and not default"
                    )
            if self.dev_mailer_echo:
                raise ValueError(f"in {self.app_env} DEV_MAILER_ECHO must be off")
        return self

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        return cls(
            app_env=config.APP_ENV,
            jwt_secret=config.JWT_SECRET,
            access_token_ttl=timedelta(minutes=config.JWT_ACCESS_TTL_MINUTES),
            refresh_token_pepper=config.REFRESH_TOKEN_PEPPER,
            refresh_token_ttl=timedelta(days=config.REFRESH_TTL_DAYS),
            refresh_tokens_per_user=config.REFRESH_TOKENS_PER_USER,
            verification_code_pepper=config.VERIFICATION_CODE_PEPPER,
            verification_code_ttl=timedelta(seconds=config.VERIFY_CODE_TTL_SECONDS),
            verification_resend_cooldown=timedelta(
                seconds=config.VERIFY_RESEND_COOLDOWN_SECONDS
            ),
            verification_max_attempts=config.VERIFY_MAX_ATTEMPTS,
            max_failed_logins=config.LOGIN_MAX_FAILED_ATTEMPTS,
            lockout_duration=timedelta(minutes=config.LOGIN_LOCKOUT_MINUTES),
            bcrypt_rounds=config.BCRYPT_ROUNDS,
            dev_mailer_echo=config.DEV_MAILER_ECHO,
        )
