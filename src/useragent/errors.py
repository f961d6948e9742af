"""Application-level exception types for UserAgent."""

from __future__ import annotations


class UserAgentError(Exception):
    """Base exception for UserAgent."""


class ConfigurationError(UserAgentError):
    """Raised for invalid settings or unknown collaborator names."""


class CaptureError(UserAgentError):
    """Raised when the page state (screenshot or element list) cannot be captured."""


class BrowserNotLaunchedError(UserAgentError):
    """Raised when a browser operation runs before launch or after close."""


class ModelError(UserAgentError):
    """Base exception for LLM collaborator failures."""


class ModelOutputError(ModelError):
    """Raised when the model answered but the answer cannot be parsed."""


class ModelCallError(ModelError):
    """Raised when the model could not be reached (transport or process error)."""
