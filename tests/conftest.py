"""Shared fixtures for the order tool tests."""

import logging

import pytest

from nbx_trader.bot.config import AppConfig, Credentials
from nbx_trader.bot.logging_config import LOGGER_NAME

FIXED_ORDER = {
    "id": "abc123",
    "market": "BTC-NOK",
    "side": "BUY",
    "quantity": "0.0031",
    "status": "FILLED",
}


class FakeExchangeClient:
    """Stand-in for NBXClient that records every call."""

    def __init__(self, order_id="abc123", order=None, fail_on=None, error=None):
        self.order_id = order_id
        self.order = order if order is not None else dict(FIXED_ORDER)
        self.fail_on = fail_on
        self.error = error
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.fail_on == name:
            raise self.error

    def authenticate(self, credentials, nonce_window):
        self._record("authenticate", credentials, nonce_window)

    def market_buy(self, market, max_quantity, fiat_amount):
        self._record("market_buy", market, max_quantity, fiat_amount)
        return self.order_id

    def market_sell(self, market, quantity):
        self._record("market_sell", market, quantity)
        return self.order_id

    def get_order(self, order_id):
        self._record("get_order", order_id)
        return self.order

    @property
    def call_names(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def credentials():
    return Credentials(
        account_id="acct-1",
        key_id="key-1",
        secret="c2VjcmV0LWtleQ==",
        passphrase="hunter2",
    )


@pytest.fixture
def app_config(credentials):
    return AppConfig(credentials=credentials)


@pytest.fixture
def fake_client():
    return FakeExchangeClient()


@pytest.fixture
def nbx_env(monkeypatch, tmp_path):
    """Environment for CLI runs: credentials set, logs under tmp_path."""
    monkeypatch.setenv("NBX_ACCOUNT_ID", "acct-1")
    monkeypatch.setenv("NBX_KEY", "key-1")
    monkeypatch.setenv("NBX_SECRET", "c2VjcmV0LWtleQ==")
    monkeypatch.setenv("NBX_PASSPHRASE", "hunter2")
    monkeypatch.setenv("NBX_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("NBX_BASE_URL", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers added by setup_logging so each test configures its own."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
