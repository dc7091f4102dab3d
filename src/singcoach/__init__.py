"""SingCoach - alignment and performance scoring for sung attempts."""

__version__ = "0.3.0"
