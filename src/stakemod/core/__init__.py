"""Core configuration for Stakemod."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
