"""Configuration module for the FusionAuth client wrapper."""
from .settings import ClientConfig, load_settings

__all__ = ["ClientConfig", "load_settings"]
