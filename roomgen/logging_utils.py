"""Logging utilities for roomgen.

Provides color-coded console output to distinguish placement work from
service-level events, errors and summaries.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for operation types
    BLUE = "\033[94m"      # Placement engine detail
    YELLOW = "\033[93m"    # Content repository calls
    RED = "\033[91m"       # Errors and retries
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if ROOMGEN_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("ROOMGEN_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def placement_debug_enabled() -> bool:
    """Per-placement detail is printed only when DEBUG_PLACEMENT is truthy."""
    return os.getenv("DEBUG_PLACEMENT", "").lower() in ("1", "true", "yes")


def log_deterministic(message: str) -> None:
    """Log a placement engine detail (blue), gated on DEBUG_PLACEMENT."""
    if placement_debug_enabled():
        print(colored(f"{TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_repository(message: str) -> None:
    """Log a content repository call (yellow)."""
    print(colored(f"{TAG_REPOSITORY} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error or retry (red)."""
    print(colored(f"{TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{TAG_INFO} {message}", Color.CYAN))


# Markers for operation types (color-blind accessible)
TAG_DETERMINISTIC = "[•]"  # Placement engine
TAG_REPOSITORY = "[API]"   # Content repository
TAG_ERROR = "[!]"          # Error/retry
TAG_SUCCESS = "[✓]"        # Success
TAG_INFO = "[i]"           # Information
