__version__ = "1.0.0"

from .exceptions import (
    AmbiguousInputError,
    ConfigurationError,
    ConnectivityError,
    ExtractionError,
    KeyNotFoundError,
    MultipleKeysError,
    ParseError,
    ProcessError,
    TypeMismatchError,
    ValidationError,
)
from .key_header import PUBLIC_KEY, SECRET_KEY, KeyHeader
from .key_loader import KeyLoader

__all__ = [
    "KeyLoader",
    "KeyHeader",
    "PUBLIC_KEY",
    "SECRET_KEY",
    "AmbiguousInputError",
    "ConfigurationError",
    "ConnectivityError",
    "ExtractionError",
    "KeyNotFoundError",
    "MultipleKeysError",
    "ParseError",
    "ProcessError",
    "TypeMismatchError",
    "ValidationError",
]
