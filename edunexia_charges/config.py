"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_fee_rates() -> Dict[str, Decimal]:
    return {"BOLETO_PIX": Decimal("0.04"), "CREDIT_CARD": Decimal("0.05")}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Payment gateway
    gateway_api_base: str = "https://api.asaas.com/v3"
    gateway_api_key: str = ""

    # Service
    service_name: str = "edunexia-charges"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Billing rules
    fee_rates: Dict[str, Decimal] = Field(default_factory=_default_fee_rates)  # rail -> fee rate
    max_installments: int = 12
    wizard_step_gating: bool = True

    # Wizard sessions
    wizard_ttl_seconds: float = 3600.0
    wizard_max_sessions: int = 1000


settings = Settings()
