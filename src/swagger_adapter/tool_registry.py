"""Tool registry for the Swagger Adapter."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, Dict, List, Optional

from pydantic import Field

from .config import Settings
from .models import CallApiInput, HttpMethod, LoadSwaggerInput, LoginInput
from .service import AdapterService


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    handler: Callable[..., Awaitable[str]]


class ToolRegistry:
    """Binds tool names and typed parameters to ``AdapterService`` handlers.

    Handlers return the result envelope as indented JSON text.
    """

    def __init__(self, settings: Settings, service: AdapterService) -> None:
        self.settings = settings
        self.service = service

    def load_tools(self) -> List[ToolDefinition]:
        tools = [
            ToolDefinition(
                name="load-swagger",
                description="Load and inspect Swagger/OpenAPI specification",
                handler=self._load_swagger_handler(),
            ),
            ToolDefinition(
                name="login",
                description="Login to API and return authentication token",
                handler=self._login_handler(),
            ),
            ToolDefinition(
                name="call-api",
                description="Call any API endpoint with optional authentication",
                handler=self._call_api_handler(),
            ),
        ]

        allowlist = self.settings.tool_allowlist()
        if allowlist:
            skipped = [t.name for t in tools if t.name not in allowlist]
            if skipped:
                logger.info("Tools excluded by allowlist: %s", ", ".join(skipped))
            tools = [t for t in tools if t.name in allowlist]
        return tools

    def _load_swagger_handler(self) -> Callable[..., Awaitable[str]]:
        service = self.service

        async def load_swagger(
            url: Annotated[str, Field(description="HTTPS URL to Swagger/OpenAPI spec")],
        ) -> str:
            result = await service.load_swagger(LoadSwaggerInput(url=url))
            return result.to_text()

        return load_swagger

    def _login_handler(self) -> Callable[..., Awaitable[str]]:
        service = self.service

        async def login(
            baseUrl: Annotated[str, Field(description="Base URL of the API")],  # noqa: N803
            path: Annotated[str, Field(description="Login endpoint path (e.g., /auth/login)")],
            body: Annotated[
                Optional[Dict[str, Any]], Field(description="Login credentials")
            ] = None,
            tokenField: Annotated[  # noqa: N803
                str, Field(description="Field name containing the token in response")
            ] = "token",
        ) -> str:
            request = LoginInput(baseUrl=baseUrl, path=path, body=body, tokenField=tokenField)
            result = await service.login(request)
            return result.to_text()

        return login

    def _call_api_handler(self) -> Callable[..., Awaitable[str]]:
        service = self.service

        async def call_api(
            baseUrl: Annotated[str, Field(description="Base URL of the API")],  # noqa: N803
            method: Annotated[HttpMethod, Field(description="HTTP method")],
            path: Annotated[str, Field(description="API endpoint path")],
            query: Annotated[
                Optional[Dict[str, Any]], Field(description="Query parameters")
            ] = None,
            body: Annotated[Optional[Dict[str, Any]], Field(description="Request body")] = None,
            authToken: Annotated[  # noqa: N803
                Optional[str], Field(description="Bearer authentication token")
            ] = None,
        ) -> str:
            request = CallApiInput(
                baseUrl=baseUrl,
                method=method,
                path=path,
                query=query,
                body=body,
                authToken=authToken,
            )
            result = await service.call_api(request)
            return result.to_text()

        return call_api
