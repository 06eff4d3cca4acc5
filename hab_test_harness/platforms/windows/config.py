"""Configuration for the Windows platform."""

from pydantic import BaseModel


class WindowsPlatformConfig(BaseModel):
    """Configuration for the Windows platform. No settings are defined yet."""
