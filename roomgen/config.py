"""
roomgen Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Library configuration loaded from environment variables."""

    # Content API (D&D 5e SRD) used by the API repositories
    DND_API_BASE_URL: str = os.getenv("DND_API_BASE_URL", "https://www.dnd5eapi.co")
    API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_SECONDS", "10"))
    # Total attempts per request, including the first one
    API_MAX_ATTEMPTS: int = int(os.getenv("API_MAX_ATTEMPTS", "3"))

    # Room defaults
    DEFAULT_LIGHT_LEVEL: str = os.getenv("DEFAULT_LIGHT_LEVEL", "bright")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors for unusable values."""
        if cls.API_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"API_TIMEOUT_SECONDS must be positive, got {cls.API_TIMEOUT_SECONDS}"
            )

        if cls.API_MAX_ATTEMPTS < 1:
            raise ValueError(
                f"API_MAX_ATTEMPTS must be at least 1, got {cls.API_MAX_ATTEMPTS}"
            )

        if cls.DEFAULT_LIGHT_LEVEL.lower() not in ("bright", "dim", "dark"):
            raise ValueError(
                "DEFAULT_LIGHT_LEVEL must be one of 'bright', 'dim' or 'dark', "
                f"got {cls.DEFAULT_LIGHT_LEVEL!r}"
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "roomgen Configuration:",
            f"  Content API: {cls.DND_API_BASE_URL}",
            f"  API Timeout: {cls.API_TIMEOUT_SECONDS}s",
            f"  API Attempts: {cls.API_MAX_ATTEMPTS}",
            f"  Default Light Level: {cls.DEFAULT_LIGHT_LEVEL}",
        ]
        return "\n".join(lines)
