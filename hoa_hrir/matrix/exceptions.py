"""
Custom Exceptions Module

This module defines the exception hierarchy for the HRIR matrix creator,
providing specific error types for configuration, decoding and export.
"""

class HrirError(Exception):
    """Base exception class for all HRIR matrix creator errors."""
    pass


class ConfigurationError(HrirError):
    """Error in subject or creator configuration."""
    pass


class ValidationError(HrirError):
    """Error during parameter validation."""
    pass


class DecodingError(HrirError):
    """Error while decoding an impulse response file."""
    pass


class ExportError(HrirError):
    """Error while writing an exported matrix artifact."""
    pass


class MathError(HrirError):
    """Error in mathematical calculations."""

    class DomainError(HrirError):
        """Error due to input values outside the valid domain."""
        pass
