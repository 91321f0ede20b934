"""
設定模組
"""

from .app import AppSettings, configure_logging, settings


__all__ = ["AppSettings", "configure_logging", "settings"]
