"""
Exception types raised by the position estimation system.
"""

from typing import Optional


class TrilaterationError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, device_id: Optional[str] = None):
        self.device_id = device_id
        if device_id is not None:
            message = f"{message} (device {device_id})"
        super().__init__(message)


class ConfigurationError(TrilaterationError, ValueError):
    """Add-on options are missing or invalid."""


class EstimationError(TrilaterationError):
    """Position estimation failed for a single device."""


class InsufficientMeasurements(EstimationError):
    """None of the reported anchors are known to the anchor table."""


class InsufficientDegreesOfFreedom(EstimationError):
    """Only one usable measurement, so the standard error is undefined."""


class ServiceError(TrilaterationError):
    """An external service request failed or returned an unusable payload."""
