"""Fixtures shared by the connector unit tests."""

import pytest
import pytest_asyncio

from bigbank.infrastructure.banking import BankSession
from bigbank_config import Settings
from tests.shared.fixtures.bigbank_server import (
    AUTH_BASE_URL,
    BANKING_BASE_URL,
    FakeBigbank,
)


@pytest.fixture
def fake_bank() -> FakeBigbank:
    return FakeBigbank()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        auth_base_url=AUTH_BASE_URL,
        banking_base_url=BANKING_BASE_URL,
        default_currency="EUR",
        timezone="Europe/Berlin",
    )


@pytest_asyncio.fixture
async def session(fake_bank: FakeBigbank, settings: Settings):
    bank_session = BankSession.from_settings(settings, transport=fake_bank.transport)
    yield bank_session
    await bank_session.close()
