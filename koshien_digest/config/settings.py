import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, Field, HttpUrl, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GAMELIST_BASE_URL = (
    "https://www.asahicom.jp/koshien/contents/virtualbaseball/site/chihou_gamelist"
)
DEFAULT_REGION_LINK_BASE_URL = "https://vk.sportsbull.jp/koshien"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Raised when required settings are missing or invalid."""

    pass


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Roster spreadsheet (Google Apps Script web app)
    roster_api_url: HttpUrl = Field(
        ...,
        validation_alias=AliasChoices("GAS_API_URL", "roster_api_url"),
        description="Endpoint returning the tracked team roster as a JSON array.",
    )
    roster_api_key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("GAS_API_KEY", "roster_api_key"),
        description="Value sent as the `key` query parameter to the roster endpoint.",
    )

    # Outbound webhook
    slack_webhook_url: HttpUrl = Field(
        ...,
        validation_alias=AliasChoices("SLACK_WEBHOOK_URL", "slack_webhook_url"),
        description="Incoming webhook receiving the daily digest.",
    )

    # Feed endpoints
    gamelist_base_url: str = Field(
        DEFAULT_GAMELIST_BASE_URL,
        validation_alias=AliasChoices("GAMELIST_BASE_URL", "gamelist_base_url"),
        description="Base URL of the per-prefecture game list feeds.",
    )
    region_link_base_url: str = Field(
        DEFAULT_REGION_LINK_BASE_URL,
        validation_alias=AliasChoices("REGION_LINK_BASE_URL", "region_link_base_url"),
        description="Base URL linked from each region header in the digest.",
    )

    # HTTP behaviour
    request_timeout: float = Field(
        30.0,
        gt=0,
        validation_alias=AliasChoices("REQUEST_TIMEOUT", "request_timeout"),
        description="Timeout in seconds applied to every outbound request.",
    )
    max_attempts: int = Field(
        1,
        ge=1,
        validation_alias=AliasChoices("MAX_ATTEMPTS", "max_attempts"),
        description="Total attempts per request (1 disables retries).",
    )

    # Digest
    timezone: str = Field(
        "Asia/Tokyo",
        validation_alias=AliasChoices("TIMEZONE", "timezone"),
        description="IANA timezone used to decide which day 'today' is.",
    )
    dry_run: bool = Field(
        False,
        validation_alias=AliasChoices("DRY_RUN", "dry_run"),
        description="Render the digest without posting it to the webhook.",
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("gamelist_base_url", "region_link_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def secrets(self) -> list[str]:
        """Values that must never reach the logs verbatim."""
        return [self.roster_api_key, str(self.slack_webhook_url)]


def load_settings(**overrides) -> AppSettings:
    """Loads and validates application settings.

    Raises:
        ConfigurationError: if a required value is missing or malformed.
    """
    try:
        settings = AppSettings(**overrides)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid or missing settings: {', '.join(missing)}"
        ) from e

    log_level_upper = settings.log_level.upper()
    # Validate log_level even if loaded from .env
    if log_level_upper not in VALID_LOG_LEVELS:
        logging.warning(
            f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
        )
        settings.log_level = "INFO"
    else:
        settings.log_level = log_level_upper
    return settings


def describe(settings: AppSettings) -> str:
    """One-line summary of the active settings without secrets."""
    return (
        f"roster={settings.roster_api_url} key=**** "
        f"feeds={settings.gamelist_base_url} timeout={settings.request_timeout}s "
        f"attempts={settings.max_attempts} tz={settings.timezone} dry_run={settings.dry_run}"
    )
