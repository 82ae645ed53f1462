"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientSession, web

from pyatagone.client import AtagOneClient
from pyatagone.models import ConnectionSettings


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from aiohttp.test_utils import TestServer


# Sample thermostat replies
SAMPLE_RETRIEVE_REPLY: dict[str, Any] = {
    "retrieve_reply": {
        "seqnr": 1,
        "status": {
            "device_id": "6808-1401-3109_15-30-001-544",
            "device_status": 16385,
            "connection_status": 23,
            "date_time": 503187241,
        },
        "report": {
            "report_time": 503187241,
            "burning_hours": 1206.51,
            "room_temp": 20.4,
            "outside_temp": 8.3,
            "ch_setpoint": 35.2,
            "ch_water_pres": 1.6,
            "ch_water_temp": 34.5,
            "boiler_status": 8,
            "shown_set_temp": 20.5,
        },
        "control": {
            "ch_status": 13,
            "ch_control_mode": 0,
            "ch_mode": 1,
            "ch_mode_temp": 20.5,
            "dhw_temp_setp": 50.0,
        },
        "acc_status": 2,
    }
}


class FakeThermostat:
    """In-memory ATAG One thermostat served through aiohttp.

    Attributes:
        pair_statuses: acc_status values returned by successive pair requests;
            the last one repeats.
        retrieve_reply: Body returned for /retrieve.
        update_acc_status: acc_status returned for /update.
        requests: (path, body) of every request received.
    """

    def __init__(self) -> None:
        self.pair_statuses: list[int] = [2]
        self.retrieve_reply: dict[str, Any] = copy.deepcopy(SAMPLE_RETRIEVE_REPLY)
        self.update_acc_status: int = 2
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def bodies(self, path: str) -> list[dict[str, Any]]:
        """Return the bodies received on one endpoint."""
        return [body for request_path, body in self.requests if request_path == path]

    async def pair_message(self, request: web.Request) -> web.Response:
        self.requests.append((request.path, await request.json()))
        status = self.pair_statuses.pop(0) if len(self.pair_statuses) > 1 else self.pair_statuses[0]
        return web.json_response({"pair_reply": {"seqnr": 1, "acc_status": status}})

    async def retrieve(self, request: web.Request) -> web.Response:
        self.requests.append((request.path, await request.json()))
        return web.json_response(self.retrieve_reply)

    async def update(self, request: web.Request) -> web.Response:
        self.requests.append((request.path, await request.json()))
        return web.json_response({"update_reply": {"seqnr": 1, "acc_status": self.update_acc_status}})

    def make_app(self) -> web.Application:
        """Create an aiohttp application serving the thermostat endpoints."""
        app = web.Application()
        app.router.add_post("/pair_message", self.pair_message)
        app.router.add_post("/retrieve", self.retrieve)
        app.router.add_post("/update", self.update)
        return app


@pytest.fixture
def thermostat() -> FakeThermostat:
    """Create a fake thermostat."""
    return FakeThermostat()


@pytest.fixture
def settings() -> ConnectionSettings:
    """Create sample connection settings."""
    return ConnectionSettings(
        host="192.168.1.20",
        mac_address="AABBCCDDEEFF",
        device_name="Home controller",
        email="user@example.com",
    )


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def mock_response() -> MagicMock:
    """Create a mock aiohttp ClientResponse usable as an async context manager.

    Returns:
        Mock ClientResponse for testing.
    """
    response = MagicMock()
    response.status = 200
    response.headers = {}
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


@pytest.fixture
def sample_retrieve_reply() -> dict[str, Any]:
    """Create a retrieve reply that is safe to modify."""
    return copy.deepcopy(SAMPLE_RETRIEVE_REPLY)


@pytest.fixture
async def thermostat_server(
    aiohttp_server: Callable[[web.Application], Awaitable[TestServer]],
    thermostat: FakeThermostat,
) -> TestServer:
    """Serve the fake thermostat on a local port."""
    return await aiohttp_server(thermostat.make_app())


@pytest.fixture
async def atag_client(thermostat_server: TestServer) -> AsyncGenerator[AtagOneClient]:
    """Create a client talking to the fake thermostat.

    Yields:
        AtagOneClient with its own session.
    """
    client = AtagOneClient(
        host=thermostat_server.host,
        mac_address="aa:bb:cc:dd:ee:ff",
        device_name="Home controller",
        email="user@example.com",
        port=thermostat_server.port,
        timeout=2,
    )
    async with client:
        yield client
