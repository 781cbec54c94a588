"""
FastAPI dependency for injecting application settings.
"""

from finflow.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """Settings for route handlers. Tests override this to swap environments."""
    return get_settings()


__all__ = ["get_app_settings"]
