"""OpenAPI document loader and base URL resolution."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, Optional

import httpx
import yaml
from openapi_spec_validator import validate

from .errors import InvalidDocumentError, InvalidInputError, TransportError, ValidationError
from .models import SpecDocument


logger = logging.getLogger(__name__)

_ACCEPT_HEADERS = {"Accept": "application/json, application/yaml"}


def resolve_base_url(document: SpecDocument) -> Optional[str]:
    """Return the origin the document's endpoints are served under.

    The first v3 ``servers`` entry wins. Otherwise a v2 ``host`` is combined
    with the first of ``schemes`` (``https`` by default) and ``basePath``.
    ``None`` when the document declares neither.
    """
    if document.servers:
        return document.servers[0]

    if document.host:
        scheme = document.schemes[0] if document.schemes else "https"
        return f"{scheme}://{document.host}{document.base_path or ''}"

    return None


class OpenAPILoader:
    def __init__(
        self,
        timeout_seconds: float = 10,
        max_document_bytes: int = 5 * 1024 * 1024,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_document_bytes = max_document_bytes
        self.transport = transport

    async def load_spec(self, url: str) -> SpecDocument:
        if not url.startswith("https://"):
            raise InvalidInputError("Only HTTPS URLs are allowed")

        content = await self._fetch(url)
        raw = self._parse(content)
        if not isinstance(raw, dict) or not (raw.get("openapi") or raw.get("swagger")):
            raise InvalidDocumentError("Invalid Swagger/OpenAPI document")

        raw = _normalize_version_markers(raw)
        self._validate(raw)
        return SpecDocument.from_mapping(raw)

    async def _fetch(self, url: str) -> bytes:
        body = bytearray()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                async with client.stream("GET", url, headers=_ACCEPT_HEADERS) as response:
                    if not response.is_success:
                        raise TransportError(
                            f"Request failed with status code {response.status_code}"
                        )
                    declared = response.headers.get("content-length", "")
                    if declared.isdigit() and int(declared) > self.max_document_bytes:
                        raise self._oversize_error()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) > self.max_document_bytes:
                            raise self._oversize_error()
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"timeout of {int(self.timeout_seconds * 1000)}ms exceeded"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        logger.debug("Fetched OpenAPI document: %s (%s bytes)", url, len(body))
        return bytes(body)

    def _oversize_error(self) -> TransportError:
        return TransportError(f"maxContentLength size of {self.max_document_bytes} exceeded")

    def _parse(self, content: bytes) -> Any:
        try:
            return json.loads(content)
        except RecursionError as exc:
            raise InvalidDocumentError("Document is nested too deeply") from exc
        except ValueError:
            pass

        try:
            data = yaml.load(content, Loader=_BoundedYamlLoader)
            return _stringify_keys(data)
        except RecursionError as exc:
            raise InvalidDocumentError("Document is nested too deeply") from exc
        except yaml.YAMLError as exc:
            raise InvalidDocumentError("Invalid Swagger/OpenAPI document") from exc

    def _validate(self, raw: Dict[str, Any]) -> None:
        try:
            external = next(_external_refs(raw), None)
        except RecursionError as exc:
            raise ValidationError("Document is nested too deeply") from exc
        if external is not None:
            raise ValidationError(f"External reference not allowed: {external}")

        try:
            validate(raw)
        except Exception as exc:
            message = getattr(exc, "message", None) or str(exc)
            raise ValidationError(message) from exc


class _BoundedYamlLoader(yaml.SafeLoader):
    """SafeLoader that refuses documents whose aliases expand past ``max_nodes``."""

    max_nodes = 1_000_000

    def construct_document(self, node: yaml.Node) -> Any:
        if _expanded_size(node, {}) > self.max_nodes:
            raise InvalidDocumentError(
                f"YAML aliases expand to more than {self.max_nodes} nodes"
            )
        return super().construct_document(node)


def _expanded_size(node: yaml.Node, sizes: Dict[int, int]) -> int:
    # Shared alias targets are counted once per use, but computed once.
    cached = sizes.get(id(node))
    if cached is not None:
        return cached
    if isinstance(node, yaml.MappingNode):
        size = 1 + sum(
            _expanded_size(key, sizes) + _expanded_size(value, sizes) for key, value in node.value
        )
    elif isinstance(node, yaml.SequenceNode):
        size = 1 + sum(_expanded_size(item, sizes) for item in node.value)
    else:
        size = 1
    sizes[id(node)] = size
    return size


def _normalize_version_markers(raw: Dict[str, Any]) -> Dict[str, Any]:
    # Unquoted YAML markers such as ``swagger: 2.0`` load as floats.
    for key in ("openapi", "swagger"):
        value = raw.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            raw[key] = str(value)
    return raw


def _external_refs(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and not ref.startswith("#"):
            yield ref
        for value in node.values():
            yield from _external_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from _external_refs(item)


def _stringify_keys(node: Any) -> Any:
    # YAML turns unquoted response codes like 200 into ints.
    if isinstance(node, dict):
        return {str(key): _stringify_keys(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_stringify_keys(item) for item in node]
    return node
