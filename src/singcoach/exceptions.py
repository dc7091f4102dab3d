"""Custom exceptions for SingCoach."""

class SingCoachError(Exception):
    """Base exception for SingCoach."""
    pass

class ConfigError(SingCoachError):
    """Invalid configuration values."""
    pass

class ValidationError(SingCoachError):
    """Invalid input parameters."""
    pass

class InputFormatError(SingCoachError):
    """Malformed attempt input data."""
    pass
