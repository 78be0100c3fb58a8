"""Shared pytest fixtures for WaaS SDK tests."""

import httpx

from waas.client import WaasClient

# Standard response fixtures
WALLET_NAME = "ae5de2d7-6314-463e-a470-0a47812fcbec"
REQUEST_ID = "9b1c2d3e-4f50-6172-8394-a5b6c7d8e9f0"
ETH_ADDRESS = "0xcbbe0c0454f3379ea8b0fbc8cf976a54154937c1"
TOKEN_ADDRESS = "0xc32ae45504ee9482db99cfa21066a59e877bc0e6"
TX_HASH = "0x8a72609aaa14c4ff4bd44bd75848c27efcc36b3341d170000000000000000000"

AUTH = {"client_id": "1", "client_secret": "2", "subscription": "3"}


def status_body(stage: str, output=None, **extra) -> dict:
    """Create an asynchronous request status body."""
    return {
        "process": REQUEST_ID,
        "status": {"stage": stage, **extra},
        "created": "2026-01-05T10:00:00Z",
        "updated": "2026-01-05T10:00:05Z",
        "output": output,
    }


def make_handler(responses: dict[tuple[str, str], tuple[int, dict]]):
    """Create a mock handler from a route -> response mapping."""

    def handler(request: httpx.Request) -> httpx.Response:
        path_only = request.url.raw_path.decode().split("?")[0]
        key = (request.method, path_only)
        if key in responses:
            status, body = responses[key]
            return httpx.Response(status, json=body)
        return httpx.Response(404, json={"message": "Not found"})

    return handler


def make_client(handler, **kwargs) -> WaasClient:
    """Create a WaasClient with MockTransport."""
    transport = httpx.MockTransport(handler)
    http_client = httpx.AsyncClient(transport=transport, base_url="http://test")
    return WaasClient(http_client=http_client, **{**AUTH, **kwargs})
