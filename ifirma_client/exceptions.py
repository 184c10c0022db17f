"""Exceptions raised by the ifirma client."""


class IfirmaError(Exception):
    """Base class for ifirma client errors."""


class ConfigurationError(IfirmaError):
    """Raised when credentials or mapping configuration are missing or invalid."""


class MissingMappingError(IfirmaError, KeyError):
    """Raised when a composite attribute has no nested field mapping."""

    def __init__(self, key: str, path: tuple = ()):
        self.key = key
        self.path = tuple(path) + (key,)
        super().__init__(f"No composite field mapping for '{'.'.join(self.path)}'")

    def __str__(self):
        return self.args[0]


class ApiRequestError(IfirmaError):
    """Raised when a request to the ifirma API fails at the transport level."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ValueRuleError(IfirmaError, ValueError):
    """Raised when a value rule cannot transform an attribute value."""

    def __init__(self, path: tuple, value, cause: Exception):
        self.path = tuple(path)
        self.value = value
        super().__init__(f"Cannot transform {'.'.join(self.path)}={value!r}: {cause}")
