"""Python client library for ATAG One thermostats.

This package provides an async client for monitoring and controlling an
ATAG One thermostat through its local JSON-over-HTTP interface.

The library is organized into layers:
1. **Transport** (pyatagone.api): Single HTTP exchanges with the thermostat
2. **Codec** (pyatagone.serializers): Wire envelopes and typed replies
3. **Pairing** (pyatagone.auth): The "press YES on the thermostat" handshake
4. **Client** (pyatagone.client): One thermostat, its settings and commands
5. **Poller** (pyatagone.poller): Periodic fetch with change events

Example:
    Basic usage:

    ```python
    from pyatagone import AtagOneClient, AtagOnePoller

    async with AtagOneClient(
        host="192.168.1.20",
        mac_address="AA:BB:CC:DD:EE:FF",
        device_name="Home controller",
        email="user@example.com",
    ) as client:
        # First time only: press YES on the thermostat
        await client.wait_for_authorization()

        snapshot = await client.get_data()
        print(f"Room temperature: {snapshot.room_temperature}°C")

        await client.set_target_temperature(20.5)

        # Watch for changes
        poller = AtagOnePoller(client, interval=60)
        poller.add_listener(print)
        await poller.start()
    ```
"""

from __future__ import annotations

from pyatagone.api import AtagOneAPI
from pyatagone.auth import AuthorizationHandler
from pyatagone.client import AtagOneClient
from pyatagone.exceptions import (
    AtagConnectionError,
    AtagOneError,
    AtagTimeoutError,
    AuthorizationDeniedError,
    AuthorizationError,
    AuthorizationPendingError,
    AuthorizationTimeoutError,
    InvalidParameterError,
    InvalidReplyError,
    MalformedReplyError,
)
from pyatagone.models import (
    AuthStatus,
    BoilerStarted,
    BoilerStatus,
    BoilerStopped,
    ChangeEvent,
    ConnectionSettings,
    DeviceSnapshot,
    MessageInfo,
    PairReply,
    PressureBelowThreshold,
    PressureChanged,
    RetrieveReply,
    RoomTemperatureChanged,
    TargetTemperatureChanged,
    UpdateReply,
)
from pyatagone.poller import AtagOnePoller, diff_snapshots
from pyatagone.scheduler import ScheduledHandle, call_every, call_later
from pyatagone.serializers import clamp_temperature, normalize_mac_address


__version__ = "0.1.0"

__all__ = [
    "AtagConnectionError",
    "AtagOneAPI",
    "AtagOneClient",
    "AtagOneError",
    "AtagOnePoller",
    "AtagTimeoutError",
    "AuthStatus",
    "AuthorizationDeniedError",
    "AuthorizationError",
    "AuthorizationHandler",
    "AuthorizationPendingError",
    "AuthorizationTimeoutError",
    "BoilerStarted",
    "BoilerStatus",
    "BoilerStopped",
    "ChangeEvent",
    "ConnectionSettings",
    "DeviceSnapshot",
    "InvalidParameterError",
    "InvalidReplyError",
    "MalformedReplyError",
    "MessageInfo",
    "PairReply",
    "PressureBelowThreshold",
    "PressureChanged",
    "RetrieveReply",
    "RoomTemperatureChanged",
    "ScheduledHandle",
    "TargetTemperatureChanged",
    "UpdateReply",
    "__version__",
    "call_every",
    "call_later",
    "clamp_temperature",
    "diff_snapshots",
    "normalize_mac_address",
]
