import os
import re
from pydantic import BaseModel, field_validator, ValidationError

from common.currencies import Currency, get_currency
from common.errors import UnsupportedCurrencyError

DEFAULT_GENERAL_URL = "https://sochain.com/api/v2/address/{currency}/{address}"
DEFAULT_BITCOIN_CASH_URL = "https://rest.bitcoin.com/v2/address/{type}/{address}"
DEFAULT_ACCOUNT_BASED_URL = "https://api.blockcypher.com/v1/eth/main/{type}/{item}"

_PLACEHOLDER = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def _resolve_template(v: str, default: str) -> str:
    # "${NAME}" reads NAME from the env, unset falls back to the public provider
    m = _PLACEHOLDER.match(v.strip())
    if m:
        v = os.environ.get(m.group(1)) or default
    if not v.startswith("https://"):
        raise ValueError("provider URL must be HTTPS")
    return v


class Providers(BaseModel):
    general: str = DEFAULT_GENERAL_URL
    bitcoin_cash: str = DEFAULT_BITCOIN_CASH_URL
    account_based: str = DEFAULT_ACCOUNT_BASED_URL

    @field_validator("general")
    @classmethod
    def general_url(cls, v: str) -> str:
        return _resolve_template(v, DEFAULT_GENERAL_URL)

    @field_validator("bitcoin_cash")
    @classmethod
    def bitcoin_cash_url(cls, v: str) -> str:
        return _resolve_template(v, DEFAULT_BITCOIN_CASH_URL)

    @field_validator("account_based")
    @classmethod
    def account_based_url(cls, v: str) -> str:
        return _resolve_template(v, DEFAULT_ACCOUNT_BASED_URL)


class HTTP(BaseModel):
    timeout: float = 30.0


class Settings(BaseModel):
    currency: str = "btc"
    testnet: bool = False
    providers: Providers = Providers()
    http: HTTP = HTTP()

    @field_validator("currency")
    @classmethod
    def known_currency(cls, v: str) -> str:
        try:
            return get_currency(v).symbol
        except UnsupportedCurrencyError as e:
            raise ValueError(str(e)) from e

    @property
    def active_currency(self) -> Currency:
        return get_currency(self.currency)


def load_settings(path: str = "config.yaml") -> Settings:
    import yaml
    cfg = {}
    if os.path.exists(path):
        with open(path, "r") as f:
            cfg = yaml.safe_load(f) or {}

    # runtime overrides
    env_currency = os.environ.get("EXPLORER_CURRENCY")
    if env_currency:
        cfg["currency"] = env_currency
    env_testnet = os.environ.get("EXPLORER_TESTNET")
    if env_testnet:
        cfg["testnet"] = env_testnet.strip().lower() in ("1", "true", "yes")

    try:
        return Settings.model_validate(cfg)
    except ValidationError as e:
        raise RuntimeError(f"Configuration error in {path}: {e}") from e
