"""
Core module - Contains configuration, logging, and the envelope engine.
"""

from sealvault.core.config import SecureConfig
from sealvault.core.logging import get_secure_logger, configure_logging, SecureLogFilter

__all__ = ["SecureConfig", "get_secure_logger", "configure_logging", "SecureLogFilter"]
