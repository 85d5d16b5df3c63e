"""
Exceptions for richmark.

The converter itself never raises; these cover the configuration layer
and the command-line front end.
"""

from typing import Optional, Dict, Any


class RichMarkError(Exception):
    """Base exception for richmark."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(RichMarkError):
    """Invalid configuration key or value."""
    
    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.key = key
        super().__init__(message, details)


class InputError(RichMarkError):
    """Markdown input could not be read."""
    pass
