# Configuration package
"""
Configuration package for the payment backend
Exports the Settings model and its factory
"""
from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
