"""Core adapter service logic: one handler per tool."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import Settings
from .errors import ToolError, TokenNotFoundError, UpstreamHttpError
from .executors import RestExecutor, join_url
from .logging import redact_payload
from .models import CallApiInput, LoadSwaggerInput, LoginInput, ToolResult
from .openapi import OpenAPILoader, resolve_base_url

logger = logging.getLogger(__name__)


class AdapterService:
    """
    Tool handlers for the adapter.

    Every handler validates its input, performs a single outbound call and
    shapes a ``ToolResult``. ``ToolError`` never escapes a handler; it is
    turned into a failure result instead. Nothing is kept between calls.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.openapi_loader = OpenAPILoader(
            timeout_seconds=settings.adapter_request_timeout_seconds,
            max_document_bytes=settings.adapter_max_document_bytes,
            transport=transport,
        )
        self.rest_executor = RestExecutor(
            timeout_seconds=settings.adapter_request_timeout_seconds,
            transport=transport,
        )

    async def load_swagger(self, request: LoadSwaggerInput) -> ToolResult:
        logger.info("Loading OpenAPI document url=%s", request.url)
        try:
            document = await self.openapi_loader.load_spec(request.url)
        except ToolError as exc:
            logger.warning("load-swagger failed: %s", exc)
            return ToolResult.failure(str(exc))

        paths = list(document.path_keys)
        return ToolResult.ok(
            baseUrl=resolve_base_url(document),
            endpoints=len(paths),
            paths=paths,
        )

    async def login(self, request: LoginInput) -> ToolResult:
        url = join_url(request.base_url, request.path)
        body = request.body or {}
        logger.info("Logging in url=%s body=%s", url, redact_payload(body))
        try:
            response = await self.rest_executor.execute("POST", url, body=body)
            data = response.data
            token = data.get(request.token_field) if isinstance(data, dict) else None
            if not isinstance(token, str):
                raise TokenNotFoundError(request.token_field)
        except ToolError as exc:
            logger.warning("login failed: %s", exc)
            return ToolResult.failure(str(exc))

        return ToolResult.ok(token=token)

    async def call_api(self, request: CallApiInput) -> ToolResult:
        url = join_url(request.base_url, request.path)
        logger.info(
            "Calling API method=%s url=%s query=%s authenticated=%s",
            request.method,
            url,
            redact_payload(request.query or {}),
            bool(request.auth_token),
        )
        try:
            response = await self.rest_executor.execute(
                request.method,
                url,
                query=request.query,
                body=request.body,
                bearer_token=request.auth_token,
            )
        except UpstreamHttpError as exc:
            logger.warning("call-api failed: %s", exc)
            return ToolResult.failure(str(exc), details=exc.details())
        except ToolError as exc:
            logger.warning("call-api failed: %s", exc)
            return ToolResult.failure(str(exc))

        return ToolResult.ok(data=response.data, status=response.status)
