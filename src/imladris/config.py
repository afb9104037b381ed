"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        store_type: Row store backend, either "sheets" or "memory".
        google_credentials_file: Path to a Google service account JSON key.
        spreadsheet_id: Identifier of the spreadsheet holding the items.
        sheet_name: Optional sheet (tab) name used to qualify cell ranges.
        sheet_id: Numeric sheet id used for row deletion, looked up when unset.
        starting_row: First spreadsheet row holding data (1-based, after the header).
        cache_ttl_seconds: Seconds a snapshot is served before it is rebuilt.
        invalidate_on_write: Drop the cached snapshot after every successful write.
        request_timeout: HTTP timeout for remote calls in seconds.
        imgur_client_id: Imgur API client id for image uploads.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format for production.

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Row store
    store_type: str = "sheets"  # sheets | memory
    google_credentials_file: str = "./credentials.json"
    spreadsheet_id: str = ""
    sheet_name: str | None = None
    sheet_id: int | None = None  # Looked up from sheet_name when unset
    starting_row: int = 2  # Row 1 holds the column headers

    # Cache
    cache_ttl_seconds: float = 30.0
    invalidate_on_write: bool = False

    # HTTP
    request_timeout: float = 30.0

    # Image hosting
    imgur_client_id: str = ""

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def credentials_path(self) -> Path:
        """Return the service account key file as a Path object.

        Returns:
            Path: Path to the Google credentials file.

        """
        return Path(self.google_credentials_file)


# Global settings instance
settings = Settings()
