"""MCP server setup for the Swagger Adapter."""

import logging
from typing import Optional

import httpx
from fastmcp import FastMCP
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from .config import Settings
from .service import AdapterService
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


def build_server(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[FastMCP, object | None]:
    service = AdapterService(settings, transport=transport)
    registry = ToolRegistry(settings, service)

    mcp = FastMCP(settings.service_name, instructions=_instructions())
    for tool in registry.load_tools():
        mcp.tool(name=tool.name, description=tool.description)(tool.handler)
        logger.info("Registered tool: %s", tool.name)

    app = _get_http_app(mcp, settings)
    _attach_auth(app, settings)
    _attach_healthcheck(app)

    return mcp, app


def _attach_auth(app, settings: Settings) -> None:  # type: ignore[no-untyped-def]
    if not app:
        return
    if not settings.adapter_auth_token:
        logger.warning("ADAPTER_AUTH_TOKEN not set; HTTP transport is unauthenticated")
        return

    async def auth_middleware(request, call_next):  # type: ignore[no-untyped-def]
        if request.method == "OPTIONS":
            return await call_next(request)
        if request.url.path.endswith("/health"):
            return await call_next(request)

        auth_header = request.headers.get("authorization", "")
        token = auth_header.replace("Bearer", "").strip()
        if token == settings.adapter_auth_token:
            return await call_next(request)

        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    app.add_middleware(BaseHTTPMiddleware, dispatch=auth_middleware)


def _attach_healthcheck(app) -> None:  # type: ignore[no-untyped-def]
    if not app:
        return

    async def healthcheck(_request):  # type: ignore[no-untyped-def]
        return JSONResponse({"status": "ok"})

    app.add_route("/health", healthcheck, methods=["GET"])


def _instructions() -> str:
    return (
        "Swagger Adapter. Load an OpenAPI/Swagger document with load-swagger, "
        "obtain a token with login, then call endpoints with call-api passing "
        "the token as authToken. No state is kept between calls."
    )


def _get_http_app(mcp: FastMCP, settings: Settings):  # type: ignore[no-untyped-def]
    transport = settings.adapter_transport.lower()
    if transport in {"http"}:
        app = mcp.http_app(transport="http", stateless_http=True, json_response=True)
        _attach_cors(app)
        return app
    if transport in {"streamable-http", "streamablehttp"}:
        app = mcp.http_app(
            transport="streamable-http", stateless_http=True, json_response=True
        )
        _attach_cors(app)
        return app
    if transport in {"sse"}:
        app = mcp.http_app(transport="sse")
        _attach_cors(app)
        return app
    return None


def _attach_cors(app) -> None:  # type: ignore[no-untyped-def]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
