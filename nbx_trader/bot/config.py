"""Runtime configuration, read once from the environment at startup."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, SecretStr

NBX_BASE_URL = "https://api.nbx.com"

# Token lifetime unit requested when authenticating
NONCE_WINDOW = "minute"


class Credentials(BaseModel):
    """NBX API credentials. Secret and passphrase are masked in repr/str."""

    model_config = ConfigDict(frozen=True)

    account_id: str = ""
    key_id: str = ""
    secret: SecretStr = SecretStr("")
    passphrase: SecretStr = SecretStr("")


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    credentials: Credentials
    nonce_window: str = NONCE_WINDOW
    base_url: str = NBX_BASE_URL
    log_dir: str = "logs"


def load_credentials(environ: Mapping[str, str] | None = None) -> Credentials:
    """Read NBX credentials from the environment.

    Missing values are left empty; the exchange reports them as an
    authentication failure.
    """
    env = os.environ if environ is None else environ
    return Credentials(
        account_id=env.get("NBX_ACCOUNT_ID", "").strip(),
        key_id=env.get("NBX_KEY", "").strip(),
        secret=SecretStr(env.get("NBX_SECRET", "").strip()),
        passphrase=SecretStr(env.get("NBX_PASSPHRASE", "")),
    )


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build the read-only configuration snapshot."""
    env = os.environ if environ is None else environ
    base_url = (env.get("NBX_BASE_URL") or NBX_BASE_URL).rstrip("/")
    return AppConfig(
        credentials=load_credentials(env),
        base_url=base_url,
        log_dir=env.get("NBX_LOG_DIR") or "logs",
    )
