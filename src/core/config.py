"""Configuration management for gardenos."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote store (Supabase) Configuration
    supabase_url: str | None = Field(default=None, description="Hosted database project URL")
    supabase_key: str | None = Field(default=None, description="Hosted database anon/service key")

    # Session Configuration
    session_file: Path = Field(
        default=Path(".gardenos_session.json"),
        description="File holding the serialized current member (login persistence)",
    )
    admin_phone: str = Field(default="9999", description="Phone number that registers as head gardener")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Google Sheets & Drive Configuration (optional, may also be supplied at runtime)
    google_api_key: str | None = Field(default=None, description="Google API key")
    google_access_token: str | None = Field(default=None, description="OAuth access token for Sheets/Drive")
    google_sheet_id: str | None = Field(default=None, description="Spreadsheet ID receiving task snapshots")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # Roles
    ROLE_HEAD_GARDENER: str = "Head Gardener"
    ROLE_GARDENER: str = "Gardener"

    # Avatars
    AVATAR_URL_TEMPLATE: str = "https://picsum.photos/seed/{seed}/200/200"

    # Google Sheets snapshot ranges
    SHEET_CLEAR_RANGE: str = "Sheet1!A1:Z1000"
    SHEET_WRITE_RANGE: str = "Sheet1!A1"

    # Sync status indicator
    SYNC_STATUS_RESET_SECONDS: float = 3.0

    # Speech synthesis
    SPEECH_RATE: float = 1.0
    SPEECH_PITCH: float = 1.0
    SPEECH_VOLUME: float = 1.0
    PREFERRED_VOICE_VENDORS: tuple[str, ...] = ("Google", "Microsoft", "Enhanced", "Siri")


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
