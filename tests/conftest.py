"""Shared fixtures: settings, sample documents and a recording HTTP transport."""

import copy
from typing import Callable, List

import httpx
import pytest

from swagger_adapter.config import Settings
from swagger_adapter.service import AdapterService


OK_RESPONSES = {"200": {"description": "OK"}}

V3_DOCUMENT = {
    "openapi": "3.0.3",
    "info": {"title": "Pets", "version": "1.0.0"},
    "servers": [
        {"url": "https://api.example.com/v1"},
        {"url": "https://staging.example.com/v1"},
    ],
    "paths": {
        "/a": {"get": {"responses": OK_RESPONSES}},
        "/b": {"post": {"responses": OK_RESPONSES}},
    },
}

V2_DOCUMENT = {
    "swagger": "2.0",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "host": "petstore.example.com",
    "basePath": "/v2",
    "schemes": ["http", "https"],
    "paths": {
        "/pets": {"get": {"responses": OK_RESPONSES}},
        "/pets/{petId}": {
            "get": {
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "type": "string"}
                ],
                "responses": OK_RESPONSES,
            }
        },
    },
}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def settings() -> Settings:
    return Settings(adapter_transport="stdio", adapter_auth_token=None)


@pytest.fixture
def v3_document() -> dict:
    return copy.deepcopy(V3_DOCUMENT)


@pytest.fixture
def v2_document() -> dict:
    return copy.deepcopy(V2_DOCUMENT)


@pytest.fixture
def make_service(settings):
    def factory(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        return AdapterService(settings, transport=transport), transport

    return factory
