"""
Custom exceptions for the cluster cache.
Provides structured error handling for cache configuration and drivers.
"""

from typing import Any, Dict, Optional


class CacheException(Exception):
    """Base exception for cache errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "CACHE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class CacheConfigurationError(CacheException):
    """Raised when a cache group is misconfigured."""

    def __init__(self, message: str = "Invalid cache configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CACHE_CONFIG_ERROR", details)


class CacheDriverNotFoundError(CacheException):
    """Raised when a cache group names a driver that is not registered."""

    def __init__(self, driver: str, details: Optional[Dict[str, Any]] = None):
        message = f"Cache driver not found: {driver}"
        super().__init__(message, "CACHE_DRIVER_NOT_FOUND", details)
