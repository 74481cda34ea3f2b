"""
Imprint Shared Module
=====================

Configuration, structured logging, and console presentation shared by
the Imprint tool package.
"""

from shared.config import ImprintConfig, get_config

__all__ = ["ImprintConfig", "get_config"]
