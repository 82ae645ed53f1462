"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pyatagone import AtagOneClient, AuthStatus
from pyatagone.const import DEFAULT_PORT


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture(scope="session")
def integration_config() -> dict[str, str]:
    """Load integration test configuration from environment.

    Returns:
        Dictionary with thermostat address and account details.
    """
    host = os.getenv("ATAG_ONE_HOST")
    mac_address = os.getenv("ATAG_ONE_MAC_ADDRESS")
    email = os.getenv("ATAG_ONE_EMAIL")

    if not host or not mac_address or not email:
        pytest.skip("Set ATAG_ONE_HOST, ATAG_ONE_MAC_ADDRESS and ATAG_ONE_EMAIL to run integration tests")

    return {
        "host": host,
        "mac_address": mac_address,
        "email": email,
        "device_name": os.getenv("ATAG_ONE_DEVICE_NAME", "pyatagone"),
        "port": os.getenv("ATAG_ONE_PORT", str(DEFAULT_PORT)),
    }


@pytest.fixture
async def integration_client(integration_config: dict[str, str]) -> AsyncGenerator[AtagOneClient]:
    """Create a client for the configured thermostat.

    Skips the test if this controller has not been authorized yet; run
    ``examples/pair_thermostat.py`` once and press "YES" on the thermostat.
    """
    client = AtagOneClient(
        host=integration_config["host"],
        mac_address=integration_config["mac_address"],
        device_name=integration_config["device_name"],
        email=integration_config["email"],
        port=int(integration_config["port"]),
    )

    async with client:
        if await client.pair() != AuthStatus.GRANTED:
            pytest.skip("Controller is not authorized on the thermostat")
        yield client


@pytest.fixture(autouse=True)
async def request_spacing(request: pytest.FixtureRequest) -> AsyncGenerator[None]:
    """Leave the thermostat a moment between integration tests.

    The thermostat handles one request at a time and answers slowly under load.
    """
    if "integration" in request.keywords:
        yield
        await asyncio.sleep(1.0)
    else:
        yield
