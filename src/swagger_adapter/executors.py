"""Execution layer for outbound REST calls."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .errors import InvalidInputError, TransportError, UpstreamHttpError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestResponse:
    status: int
    status_text: str
    data: Any


def join_url(base_url: str, path: str) -> str:
    base = base_url.rstrip("/")
    if path and not path.startswith("/"):
        return f"{base}/{path}"
    return base + path


class RestExecutor:
    """Issues one bounded HTTP request per call. No retries."""

    def __init__(
        self,
        timeout_seconds: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def execute(
        self,
        method: str,
        url: str,
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None,
        bearer_token: Optional[str] = None,
    ) -> RestResponse:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token}"

        content = json.dumps(body) if body is not None else None

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    method.upper(),
                    url,
                    headers=headers,
                    params=self._encode_query(query or {}),
                    content=content,
                )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"timeout of {int(self.timeout_seconds * 1000)}ms exceeded"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        except UnicodeEncodeError as exc:
            # httpx only accepts ASCII header values.
            raise InvalidInputError("Request header values must be ASCII") from exc

        data = self._decode_body(response)
        if response.is_error:
            logger.warning("%s %s returned %s", method.upper(), url, response.status_code)
            raise UpstreamHttpError(response.status_code, response.reason_phrase, data)

        return RestResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            data=data,
        )

    def _encode_query(self, query: Dict[str, Any]) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = []
        for key, value in query.items():
            if value is None:
                continue
            values = value if isinstance(value, (list, tuple)) else [value]
            for item in values:
                params.append((key, self._encode_scalar(item)))
        return params

    def _encode_scalar(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        return json.dumps(value)

    def _decode_body(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
