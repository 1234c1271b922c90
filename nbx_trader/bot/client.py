"""NBX exchange API client. Uses httpx with HMAC-signed token authentication."""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from decimal import Decimal
from typing import Any, Protocol

import httpx

from nbx_trader.bot.config import NBX_BASE_URL, Credentials
from nbx_trader.bot.exceptions import ConfigurationError, ExchangeAPIError, NetworkError

logger = logging.getLogger("nbx_trader.client")

DEFAULT_TIMEOUT = 10.0


class ExchangeClient(Protocol):
    """The exchange capabilities the order dispatcher depends on."""

    def authenticate(self, credentials: Credentials, nonce_window: str) -> None: ...

    def market_buy(self, market: str, max_quantity: float, fiat_amount: float) -> str: ...

    def market_sell(self, market: str, quantity: float) -> str: ...

    def get_order(self, order_id: str) -> dict[str, Any]: ...


def sign_request(secret: str, timestamp: str, method: str, path: str, body: str) -> str:
    """Return the base64 HMAC-SHA256 signature NBX expects for a token request."""
    try:
        key = base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("NBX_SECRET is not valid base64, signing with its raw bytes")
        key = secret.encode("utf-8")
    message = f"{timestamp}{method}{path}{body}".encode("utf-8")
    digest = hmac.new(key, message, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def _format_amount(value: float) -> str:
    # NBX takes plain decimal strings, never exponent notation
    text = format(Decimal(str(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class NBXClient:
    """
    Client for the NBX REST API.
    Authenticates once to obtain a bearer token, then places and reads orders.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or NBX_BASE_URL).rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)
        self._account_id: str | None = None
        self._token: str | None = None

    def __enter__(self) -> "NBXClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def authenticate(self, credentials: Credentials, nonce_window: str) -> None:
        """Exchange signed API key credentials for a session token."""
        path = f"/accounts/{credentials.account_id}/api_keys/{credentials.key_id}/tokens"
        body = json.dumps({"expiresIn": {"unit": nonce_window.upper(), "value": 1}})
        timestamp = str(int(time.time() * 1000))
        signature = sign_request(
            credentials.secret.get_secret_value(), timestamp, "POST", path, body
        )
        headers = {
            "Content-Type": "application/json",
            "X-NBX-TIMESTAMP": timestamp,
            "Authorization": (
                f"NBX-HMAC-SHA256 {credentials.passphrase.get_secret_value()}:{signature}"
            ),
        }
        logger.info("Requesting %s session token", nonce_window)
        response = self._request("POST", path, content=body, headers=headers)
        token = self._json(response).get("token")
        if not token:
            raise ExchangeAPIError(
                "Authentication response did not contain a token",
                code=response.status_code,
            )
        self._account_id = credentials.account_id
        self._token = token

    def market_buy(self, market: str, max_quantity: float, fiat_amount: float) -> str:
        """Place a market buy spending ``fiat_amount``. A ``max_quantity`` of 0 is unbounded."""
        payload: dict[str, Any] = {
            "market": market,
            "side": "BUY",
            "execution": {
                "type": "MARKET",
                "freeze": {"type": "AMOUNT", "value": _format_amount(fiat_amount)},
            },
        }
        if max_quantity > 0:
            payload["quantity"] = _format_amount(max_quantity)
        return self._create_order(payload)

    def market_sell(self, market: str, quantity: float) -> str:
        """Place a market sell of ``quantity`` units of the base asset."""
        payload = {
            "market": market,
            "side": "SELL",
            "quantity": _format_amount(quantity),
            "execution": {"type": "MARKET"},
        }
        return self._create_order(payload)

    def get_order(self, order_id: str) -> dict[str, Any]:
        """Get a single order by id."""
        response = self._request(
            "GET",
            f"/accounts/{self._require_account()}/orders/{order_id}",
            headers=self._auth_headers(),
        )
        return self._json(response)

    def _create_order(self, payload: dict[str, Any]) -> str:
        logger.info("Placing MARKET %s on %s", payload["side"], payload["market"])
        response = self._request(
            "POST",
            f"/accounts/{self._require_account()}/orders",
            json=payload,
            headers=self._auth_headers(),
        )
        order_id = self._order_id_from(response)
        logger.info("Order accepted: %s", order_id)
        return order_id

    def _require_account(self) -> str:
        if self._token is None or self._account_id is None:
            raise ConfigurationError("Client is not authenticated. Call authenticate() first.")
        return self._account_id

    def _auth_headers(self) -> dict[str, str]:
        self._require_account()
        return {"Authorization": f"Bearer {self._token}"}

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} request to NBX failed: {e}") from e
        if response.is_error:
            data = self._error_body(response)
            err_msg = data.get("message") or data.get("error") or response.reason_phrase
            raise ExchangeAPIError(
                f"HTTP {response.status_code}: {err_msg}",
                code=response.status_code,
                response=data,
            )
        return response

    @staticmethod
    def _error_body(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {"message": response.text} if response.text else {}
        return data if isinstance(data, dict) else {"message": str(data)}

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise ExchangeAPIError(
                "Invalid JSON in response", code=response.status_code
            ) from e
        if not isinstance(data, dict):
            raise ExchangeAPIError(
                "Unexpected response payload", code=response.status_code, response={"body": data}
            )
        return data

    @staticmethod
    def _order_id_from(response: httpx.Response) -> str:
        """Order id from the JSON body (bare string or ``id``) or the Location header."""
        if response.content:
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, str) and data:
                return data
            if isinstance(data, dict) and data.get("id"):
                return str(data["id"])
        location = response.headers.get("Location")
        if location:
            return location.rstrip("/").rsplit("/", 1)[-1]
        raise ExchangeAPIError(
            "Order response did not contain an order id", code=response.status_code
        )
