"""Internal models for documents, tool inputs and tool results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


@dataclass(frozen=True)
class SpecDocument:
    """Validated OpenAPI v3 or Swagger v2 document.

    v3 documents carry ``servers``; v2 documents carry ``host``,
    ``base_path`` and ``schemes``. ``paths`` keeps declaration order.
    """

    version: str
    servers: Tuple[str, ...] = ()
    host: Optional[str] = None
    base_path: Optional[str] = None
    schemes: Tuple[str, ...] = ()
    paths: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "SpecDocument":
        servers = tuple(
            server["url"]
            for server in raw.get("servers") or []
            if isinstance(server, dict) and server.get("url")
        )
        return cls(
            version=str(raw.get("openapi") or raw.get("swagger")),
            servers=servers,
            host=raw.get("host"),
            base_path=raw.get("basePath"),
            schemes=tuple(raw.get("schemes") or ()),
            paths=MappingProxyType(dict(raw.get("paths") or {})),
        )

    @property
    def path_keys(self) -> Tuple[str, ...]:
        return tuple(self.paths.keys())


@dataclass(frozen=True)
class ToolResult:
    success: bool
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, **payload: Any) -> "ToolResult":
        return cls(success=True, payload=payload)

    @classmethod
    def failure(cls, error: str, details: Optional[Dict[str, Any]] = None) -> "ToolResult":
        return cls(success=False, error=error, details=details)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, **self.payload}
        result: Dict[str, Any] = {"success": False, "error": self.error}
        if self.details is not None:
            result["details"] = self.details
        return result

    def to_text(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False, default=str)


class LoadSwaggerInput(BaseModel):
    url: str = Field(description="HTTPS URL to Swagger/OpenAPI spec")


class LoginInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(alias="baseUrl", description="Base URL of the API")
    path: str = Field(description="Login endpoint path (e.g., /auth/login)")
    body: Optional[Dict[str, Any]] = Field(default=None, description="Login credentials")
    token_field: str = Field(
        default="token",
        alias="tokenField",
        description="Field name containing the token in response",
    )


class CallApiInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(alias="baseUrl", description="Base URL of the API")
    method: HttpMethod = Field(description="HTTP method")
    path: str = Field(description="API endpoint path")
    query: Optional[Dict[str, Any]] = Field(default=None, description="Query parameters")
    body: Optional[Dict[str, Any]] = Field(default=None, description="Request body")
    auth_token: Optional[str] = Field(
        default=None, alias="authToken", description="Bearer authentication token"
    )
