import logging

from src.app.services.mailer import IMailer

logger = logging.getLogger(__name__)


class LoggingMailer(IMailer):
    """
    Development mailer: writes the verification code to the log.

    Real delivery (SMTP, provider API) plugs in behind IMailer.
    """

    def __init__(self, echo_codes: bool = False):
        self.echo_codes = echo_codes

    async def send_verification_code(self, email: str, code: str) -> None:
        if self.echo_codes:
            logger.info(f"[DEV-EMAIL] verification code email={email} code={code}")
        else:
            logger.info("Verification code dispatched", extra={"email": email})
