"""Exception types shared across the synthesizer."""


class CodeSynthError(Exception):
    """Base exception for synthesizer errors."""

    def __init__(self, message: str, error_code: str = "CODE_SYNTH_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ConfigurationError(CodeSynthError):
    """Raised when required configuration (e.g. the API key) is missing."""

    def __init__(self, message: str):
        super().__init__(message, error_code="CONFIGURATION")


class InputValidationError(CodeSynthError):
    """Raised before any external call when user input is unusable."""

    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_INPUT")


class StorageParseError(CodeSynthError):
    """Raised when a persisted value cannot be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Could not parse stored value '{key}': {reason}", error_code="STORAGE_PARSE")
        self.key = key


class StreamError(CodeSynthError):
    """Raised when the model stream fails mid-call."""

    def __init__(self, message: str):
        super().__init__(message, error_code="STREAM")


__all__ = [
    "CodeSynthError",
    "ConfigurationError",
    "InputValidationError",
    "StorageParseError",
    "StreamError",
]
