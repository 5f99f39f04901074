"""Errors raised by the configuration document system."""


class ConfigurationError(Exception):
    """Base class for configuration errors."""


class InvalidVersionFormat(ConfigurationError, ValueError):
    """Raised when a string is not a dotted-integer version."""

    def __init__(self, version: str):
        super().__init__(f"'{version}' is not a valid version")
        self.version = version


class InvalidKey(ConfigurationError, ValueError):
    """Raised when a document key contains characters outside the allowed set."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Invalid key '{key}': {reason}")
        self.key = key
        self.reason = reason


class InvalidKeyQuoting(InvalidKey):
    """Raised when a quoted key section is not wrapped in exactly one pair of quotes."""


class DocumentParseError(ConfigurationError):
    """Raised when raw text does not form a valid configuration document.

    Attributes:
        line: 1-based line of the document where the failing block or line starts, if known
    """

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line
