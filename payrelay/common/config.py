"""Environment-driven settings for the payment relay.

The process loads this once at startup and hands the values to the relay
service (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


LIVE_KEY_PREFIX = "sk_live_"


class RelaySettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "payment-relay"
    service_title: str = "Favs Bling Payment Backend"
    log_level: str = "INFO"
    port: int = 3000
    paystack_secret_key: str | None = None
    paystack_base_url: str = "https://api.paystack.co"
    paystack_timeout_seconds: float = 30.0
    callback_url: str = "https://blessing-suru.web.app/?payment_verify=true"
    cors_origins: list[str] = ["https://blessing-suru.web.app", "http://localhost:3000"]
    otel_exporter_otlp_endpoint: str = ""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def paystack_mode(self) -> str:
        """LIVE/TEST derived from the key prefix, NOT_CONFIGURED without a key."""

        if not self.paystack_secret_key:
            return "NOT_CONFIGURED"
        return "LIVE" if self.paystack_secret_key.startswith(LIVE_KEY_PREFIX) else "TEST"


settings = RelaySettings()
