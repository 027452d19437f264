"""
Observability module for oauth2-utils.

Usage:
    from oauth2_utils.observability import setup_logging

    setup_logging(log_format="json", log_level="DEBUG")
"""

from oauth2_utils.observability.logging_config import (
    SecretRedactionFilter,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "SecretRedactionFilter",
]
