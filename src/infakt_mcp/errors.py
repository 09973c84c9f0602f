"""Exception hierarchy for the inFakt MCP server."""

from typing import Any


class InFaktError(Exception):
    """Base exception for everything raised by this package."""


class ConfigurationError(InFaktError):
    """Required configuration is missing or invalid."""


class InvalidAmountError(InFaktError, ValueError):
    """A monetary value or tax symbol could not be parsed."""

    def __init__(self, value: Any, field: str | None = None):
        target = f" for {field}" if field else ""
        super().__init__(f"Invalid price value{target}: {value!r}")
        self.value = value
        self.field = field


class MissingArgumentError(InFaktError, ValueError):
    """A tool call is missing an argument it cannot run without."""

    def __init__(self, tool_name: str, argument: str):
        super().__init__(f"Tool '{tool_name}' requires argument '{argument}'")
        self.tool_name = tool_name
        self.argument = argument


class UnknownToolError(InFaktError):
    """Dispatch received a tool name that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class InFaktAPIError(InFaktError):
    """Base exception for inFakt API errors."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class BackendError(InFaktAPIError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(
            f"inFakt API Error ({status_code}): {message}",
            status_code=status_code,
            details=details,
        )
        self.backend_message = message


class TransportError(InFaktAPIError):
    """The request never got a response (DNS, connect, timeout)."""

    pass
