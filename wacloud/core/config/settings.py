"""
Settings for the wacloud WhatsApp Cloud API client.

Simple, reliable environment variable configuration. Credentials are read here
but only enforced when a caller builds request parameters from settings, so the
library can be imported without a configured account.
"""

import os

from dotenv import load_dotenv

# Load .env file for local development - look in current working directory
load_dotenv(".env")


class Settings:
    """Client settings with environment-based configuration."""

    def __init__(self):
        # ================================================================
        # Graph API Configuration
        # ================================================================
        self.base_url: str = os.getenv("BASE_URL", "https://graph.facebook.com/")
        self.api_version: str = os.getenv("API_VERSION", "v21.0")
        self.request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "30"))

        # ================================================================
        # WhatsApp Configuration
        # ================================================================
        self.wp_access_token: str | None = os.getenv("WP_ACCESS_TOKEN")
        self.wp_phone_id: str | None = os.getenv("WP_PHONE_ID")

        # ================================================================
        # Logging Configuration
        # ================================================================
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")
        self.environment: str = os.getenv("ENVIRONMENT", "DEV")

        self._validate_settings()

    def _validate_settings(self):
        """Validate settings values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        self.log_level = self.log_level.upper()

        valid_environments = ["DEV", "PROD"]
        if self.environment.upper() not in valid_environments:
            self.environment = "DEV"  # Default fallback
        self.environment = self.environment.upper()

        if self.request_timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT must be a positive number of seconds")

    def require_whatsapp_credentials(self) -> tuple[str, str]:
        """Return (phone_id, access_token), failing if either is missing."""
        if not self.wp_phone_id:
            raise ValueError("WP_PHONE_ID is required")
        if not self.wp_access_token:
            raise ValueError("WP_ACCESS_TOKEN is required")
        return self.wp_phone_id, self.wp_access_token


# Global settings instance
settings = Settings()
