"""SDK runtime settings.

Environment variables use COMMS_ prefix.
Example: COMMS_USE_NOTIFICATION_CATCHER=true, COMMS_HTTP_PROXY=http://proxy:3128
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommsSettings(BaseSettings):
    """Process-wide SDK configuration read from the environment.

    Values given explicitly to :class:`comms_sdk.CommsSdk` always win over
    these settings; they only provide defaults.
    """

    # ──────────────────────────────────────────────────────────────
    # Notification catcher
    # ──────────────────────────────────────────────────────────────

    use_notification_catcher: bool = Field(
        default=False,
        description="Route every channel to the local notification catcher",
    )

    catcher_host: str = Field(
        default="localhost",
        min_length=1,
        max_length=255,
        description="SMTP host of the notification catcher",
    )

    catcher_port: int = Field(
        default=1025,
        ge=1,
        le=65535,
        description="SMTP port of the notification catcher",
    )

    catcher_sender: str = Field(
        default="notification@comms.local",
        description="Fallback From address used for non-email channels",
    )

    # ──────────────────────────────────────────────────────────────
    # HTTP
    # ──────────────────────────────────────────────────────────────

    http_proxy: str | None = Field(
        default=None,
        description="Proxy URL used for every vendor HTTP call",
    )

    http_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300.0,
        description="Default HTTP timeout in seconds",
    )

    user_agent: str = Field(
        default="comms-sdk/0.1",
        description="User-Agent header sent to vendor APIs",
    )

    @field_validator("http_proxy", mode="before")
    @classmethod
    def _empty_proxy_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = SettingsConfigDict(
        env_prefix="COMMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
