"""Configuration module for the idcfg SDK."""
from .settings import PlatformConfig, configure_logging, load_settings

__all__ = ["PlatformConfig", "configure_logging", "load_settings"]
