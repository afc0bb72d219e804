"""
Core configuration and settings for the order events services
Resolved once at startup from the environment (and an optional .env file)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from order_events.models.events import DaprSubscription

DEFAULT_SUBSCRIPTION_ROUTE = "/orders"


def normalize_route(route: str) -> str:
    """Return the subscription route with a leading slash, defaulting to /orders"""
    trimmed = (route or "").strip()
    if not trimmed:
        return DEFAULT_SUBSCRIPTION_ROUTE
    if trimmed.startswith("/"):
        return trimmed
    return "/" + trimmed


class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_ignore_empty=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    # Service information
    service_role: str = Field(default="producer", pattern="^(producer|consumer)$")
    service_name: str = "order-events"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8080

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "console"

    # Dapr configuration
    dapr_host: str = "localhost"
    dapr_http_port: int = 3500
    dapr_pubsub_name: str = "order-pubsub"
    dapr_topic_name: str = "orders"
    dapr_subscription_route: str = DEFAULT_SUBSCRIPTION_ROUTE

    # Outbound publish configuration
    publish_timeout_seconds: float = Field(default=5.0, gt=0)

    # Tracing configuration
    enable_tracing: bool = True

    @field_validator("dapr_subscription_route", mode="before")
    @classmethod
    def _normalize_subscription_route(cls, value):
        return normalize_route(value if isinstance(value, str) else "")

    @property
    def publish_url(self) -> str:
        """Dapr publish endpoint: POST /v1.0/publish/{pubsubname}/{topic}"""
        return (
            f"http://{self.dapr_host}:{self.dapr_http_port}"
            f"/v1.0/publish/{self.dapr_pubsub_name}/{self.dapr_topic_name}"
        )

    @property
    def subscription(self) -> DaprSubscription:
        return DaprSubscription(
            pubsubname=self.dapr_pubsub_name,
            topic=self.dapr_topic_name,
            route=self.dapr_subscription_route,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
