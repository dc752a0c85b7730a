"""
Alipay Mobile Configuration Module

Loads gateway credentials and protocol options from environment variables
(prefixed with ALIPAY_) or a .env file.
"""
from pydantic_settings import BaseSettings
from typing import Literal, Optional

from .constants import ALIPAY_GATEWAY, ALIPAY_DEV_GATEWAY


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Notes:
    - Gateway host is chosen once from `environment` (or forced with
      `gateway_url`) and never re-read from the process environment
    - Keys may be given inline (PEM body or full PEM) or as file paths;
      inline text wins when both are set
    """

    # Application identity
    app_id: str = ""
    environment: Literal["production", "sandbox"] = "sandbox"
    gateway_url: Optional[str] = None

    # Key material
    app_private_key: Optional[str] = None
    app_private_key_file: Optional[str] = None
    alipay_public_key: Optional[str] = None
    alipay_public_key_file: Optional[str] = None

    # Envelope options
    notify_url: Optional[str] = None
    app_auth_token: Optional[str] = None
    charset: str = "utf-8"
    sign_type: Literal["RSA2"] = "RSA2"
    version: str = "1.0"
    format: str = "JSON"

    # Transport
    request_timeout: float = 15.0

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def gateway(self) -> str:
        """Gateway endpoint for this client."""
        if self.gateway_url:
            return self.gateway_url
        return ALIPAY_GATEWAY if self.environment == "production" else ALIPAY_DEV_GATEWAY

    class Config:
        env_file = ".env"
        env_prefix = "ALIPAY_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
