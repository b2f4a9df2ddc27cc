"""Configuration management for NutriChef AI.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini API Key: GEMINI_API_KEY preferred, API_KEY accepted for older deployments.
        # Left empty when unset; every analysis call then fails with a configuration error.
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
        # Default: gemini-2.5-flash (fast multimodal model with JSON output support)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Temperature: Controls randomness (0.0 = deterministic, 2.0 = max randomness)
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.4"))
        # Maximum image size (in MB) accepted for upload. Default: 10 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))
        # Serving count a new session starts with. Default: 1
        self.DEFAULT_SERVINGS: int = int(os.getenv("DEFAULT_SERVINGS", "1"))

    @property
    def has_api_key(self) -> bool:
        """Whether a Gemini credential is configured."""
        return bool(self.GEMINI_API_KEY)

    def validate(self) -> None:
        """Validate configuration values.

        A missing API key is not treated as invalid here: it is reported on each
        analysis attempt instead, so the rest of the application stays usable.

        Raises:
            ValueError: If a configured value is out of range.
        """
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(
                f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}"
            )
        if self.DEFAULT_SERVINGS < 1:
            raise ValueError(
                f"DEFAULT_SERVINGS must be at least 1, got: {self.DEFAULT_SERVINGS}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
