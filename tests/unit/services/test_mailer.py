import logging

import pytest

from src.adapter.services.mailer import LoggingMailer


@pytest.mark.asyncio
async def test_code_is_not_logged_by_default(caplog):
    caplog.set_level(logging.INFO, logger="src.adapter.services.mailer")

    await LoggingMailer().send_verification_code("a@studio.com", "424242")

    assert "424242" not in caplog.text
    assert "Verification code dispatched" in caplog.text


@pytest.mark.asyncio
async def test_development_echo_logs_code(caplog):
    caplog.set_level(logging.INFO, logger="src.adapter.services.mailer")

    await LoggingMailer(echo_codes=True).send_verification_code("a@studio.com", "424242")

    assert "424242" in caplog.text
