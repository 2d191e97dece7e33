"""
Application configuration using Pydantic settings.

Configuration comes from environment variables with sensible defaults.
Supports a mock mode for local development.
"""

from .settings import Settings, build_store_configuration, configure_logging, get_settings

__all__ = ["Settings", "build_store_configuration", "configure_logging", "get_settings"]
