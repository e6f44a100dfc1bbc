"""Error taxonomy for tool handlers."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ToolError(Exception):
    pass


class InvalidInputError(ToolError):
    """Caller-supplied input violates a tool constraint."""


class InvalidDocumentError(ToolError):
    """Fetched content is not an OpenAPI/Swagger document."""


class ValidationError(ToolError):
    """Document failed schema validation or reference resolution."""


class TransportError(ToolError):
    """No usable response: network failure, timeout or size limit."""


class TokenNotFoundError(ToolError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Token field '{field}' not found in response")
        self.field = field


class UpstreamHttpError(ToolError):
    """Remote API answered with an error status."""

    def __init__(self, status: int, status_text: str, data: Any, message: Optional[str] = None) -> None:
        super().__init__(message or f"Request failed with status code {status}")
        self.status = status
        self.status_text = status_text
        self.data = data

    def details(self) -> Dict[str, Any]:
        return {"status": self.status, "statusText": self.status_text, "data": self.data}
