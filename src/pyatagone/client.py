"""Device client for a single ATAG One thermostat.

This module provides the facade other components use: it owns the connection
settings, combines the transport, codec and authorization handler, and turns
authorization states reported by the device into typed errors.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from aiohttp import ClientSession  # noqa: TC002 - Used at runtime for type hints

from pyatagone.api import AtagOneAPI
from pyatagone.auth import AuthorizationHandler
from pyatagone.const import (
    DEFAULT_AUTH_INTERVAL,
    DEFAULT_AUTH_MAX_ATTEMPTS,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    PATH_RETRIEVE,
    PATH_UPDATE,
)
from pyatagone.exceptions import (
    AtagOneError,
    AuthorizationDeniedError,
    AuthorizationPendingError,
    InvalidParameterError,
    InvalidReplyError,
)
from pyatagone.models import AuthStatus, ConnectionSettings, MessageInfo
from pyatagone.scheduler import call_later
from pyatagone.serializers import (
    clamp_temperature,
    deserialize_device_snapshot,
    deserialize_retrieve_reply,
    deserialize_update_reply,
    normalize_mac_address,
    serialize_retrieve_message,
    serialize_update_message,
)


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from pyatagone.models import DeviceSnapshot, RetrieveReply
    from pyatagone.scheduler import ScheduledHandle

_LOGGER = logging.getLogger(__name__)

SNAPSHOT_INFO = MessageInfo.CONTROL | MessageInfo.REPORT | MessageInfo.STATUS


def _raise_for_acc_status(acc_status: AuthStatus | None) -> None:
    """Raise if a retrieve or update reply reports the account as not authorized.

    Whether firmware ever reports PENDING or DENIED on these replies is
    unconfirmed.
    """
    if acc_status == AuthStatus.DENIED:
        raise AuthorizationDeniedError
    if acc_status == AuthStatus.PENDING:
        raise AuthorizationPendingError


class AtagOneClient:
    """Client for one ATAG One thermostat on the local network.

    The client owns the connection settings for exactly one device. Every
    operation works on a private copy of the settings taken when the call
    starts, so :meth:`update_settings` never affects a request in flight.

    Example:
        Pair once, then read and control the thermostat:

        ```python
        from pyatagone import AtagOneClient, AuthStatus

        async with AtagOneClient(
            host="192.168.1.20",
            mac_address="aa:bb:cc:dd:ee:ff",
            device_name="Home controller",
            email="user@example.com",
        ) as client:
            status = await client.wait_for_authorization()
            if status == AuthStatus.GRANTED:
                snapshot = await client.get_data()
                print(f"Room: {snapshot.room_temperature}°C")

                await client.set_target_temperature(20.5)

                # Boost to 22°C for 30 minutes, then restore
                await client.set_target_temperature_for(22, minutes=30)
        ```
    """

    def __init__(
        self,
        host: str,
        mac_address: str,
        device_name: str,
        email: str,
        *,
        session: ClientSession | None = None,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            host: IP address or hostname of the thermostat.
            mac_address: MAC address of the thermostat, with or without separators.
            device_name: Name this controller registers under on the thermostat.
            email: Account email used for pairing.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            port: Port the thermostat listens on.
            timeout: Overall timeout in seconds for a single exchange.
        """
        self._settings = ConnectionSettings(
            host=host,
            mac_address=normalize_mac_address(mac_address),
            device_name=device_name,
            email=email,
        )
        self._api = AtagOneAPI(session=session, port=port, timeout=timeout)
        self._auth_handler = AuthorizationHandler(self._api)

        self._last_target_temperature: float | None = None
        self._override_handle: ScheduledHandle | None = None

    @property
    def api(self) -> AtagOneAPI:
        """Get the underlying transport."""
        return self._api

    @property
    def auth_handler(self) -> AuthorizationHandler:
        """Get the authorization handler."""
        return self._auth_handler

    @property
    def settings(self) -> ConnectionSettings:
        """Get a copy of the current connection settings."""
        return dataclasses.replace(self._settings)

    @property
    def last_target_temperature(self) -> float | None:
        """Get the last setpoint read from or sent to the thermostat."""
        return self._last_target_temperature

    @property
    def override_pending(self) -> bool:
        """Check if a temporary override restoration is scheduled."""
        handle = self._override_handle
        return handle is not None and not handle.cancelled and not handle.done

    async def __aenter__(self) -> AtagOneClient:
        """Enter the context manager, creating a session if needed."""
        await self._api.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Cancels any pending override restoration and closes the transport.
        """
        await self.cancel_temporary_override()
        await self._api.__aexit__(exc_type, exc_val, exc_tb)

    def update_settings(
        self,
        *,
        host: str | None = None,
        mac_address: str | None = None,
        device_name: str | None = None,
        email: str | None = None,
    ) -> None:
        """Update connection settings in place.

        Only non-empty fields overwrite current values, so a blank value
        never wipes a setting.

        Args:
            host: New IP address or hostname.
            mac_address: New MAC address; always renormalized.
            device_name: New controller name.
            email: New account email.
        """
        changes: dict[str, str] = {}
        if host:
            changes["host"] = host
        if mac_address:
            changes["mac_address"] = normalize_mac_address(mac_address)
        if device_name:
            changes["device_name"] = device_name
        if email:
            changes["email"] = email

        if changes:
            self._settings = dataclasses.replace(self._settings, **changes)
            _LOGGER.debug("Updated connection settings: %s", sorted(changes))

    # -------------------------------------------------------------------------
    # Pairing
    # -------------------------------------------------------------------------

    async def pair(self) -> AuthStatus:
        """Send a single pair request.

        The user must press "YES" on the thermostat to authorize.

        Returns:
            Authorization status reported by the thermostat.

        Raises:
            InvalidReplyError: If the reply carries no status.
        """
        return await self._auth_handler.request_pairing(self.settings)

    async def wait_for_authorization(
        self,
        max_attempts: int = DEFAULT_AUTH_MAX_ATTEMPTS,
        interval: float = DEFAULT_AUTH_INTERVAL,
        on_status: Callable[[AuthStatus], None] | None = None,
    ) -> AuthStatus:
        """Poll pairing until granted, denied or timed out.

        See :meth:`AuthorizationHandler.wait_for_authorization`.
        """
        return await self._auth_handler.wait_for_authorization(
            self.settings,
            max_attempts=max_attempts,
            interval=interval,
            on_status=on_status,
        )

    # -------------------------------------------------------------------------
    # Data retrieval
    # -------------------------------------------------------------------------

    async def retrieve(self, info: MessageInfo | int = MessageInfo.CONTROL | MessageInfo.REPORT) -> RetrieveReply:
        """Retrieve raw sub-reports from the thermostat.

        Args:
            info: Bitmask of sub-reports to request.

        Returns:
            Decoded retrieve reply. The authorization status is not checked.
        """
        settings = self.settings
        data = await self._api.request(settings.host, PATH_RETRIEVE, serialize_retrieve_message(settings, info))
        return deserialize_retrieve_reply(data)

    async def get_data(self) -> DeviceSnapshot:
        """Get the current thermostat state.

        Returns:
            DeviceSnapshot with temperatures, pressure (bar) and boiler flags.

        Raises:
            AuthorizationDeniedError: If the account is no longer authorized.
            AuthorizationPendingError: If the pair request still awaits approval.
            AtagConnectionError: If the thermostat cannot be reached.
            AtagTimeoutError: If the thermostat does not answer in time.
            MalformedReplyError: If the reply is not a retrieve reply.
        """
        reply = await self.retrieve(SNAPSHOT_INFO)
        _raise_for_acc_status(reply.acc_status)

        snapshot = deserialize_device_snapshot(reply)
        if snapshot.target_temperature is not None:
            self._last_target_temperature = snapshot.target_temperature
        return snapshot

    async def test_connection(self) -> bool:
        """Check whether the thermostat answers a status-only retrieve.

        Returns:
            True if the thermostat replied, False on any error, including
            a missing or closed session.
        """
        try:
            await self.retrieve(MessageInfo.STATUS)
        except (AtagOneError, RuntimeError) as exc:
            _LOGGER.debug("Connection test failed: %s", exc)
            return False
        return True

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    async def set_target_temperature(self, temperature: float) -> float:
        """Set the central heating setpoint.

        The temperature is rounded to 0.5 degree steps and clamped to 4-27°C.

        Args:
            temperature: Requested setpoint in degrees Celsius.

        Returns:
            The setpoint actually sent to the thermostat.

        Raises:
            InvalidParameterError: If the temperature is NaN.
            AuthorizationDeniedError: If the account is no longer authorized.
            AuthorizationPendingError: If the pair request still awaits approval.
        """
        settings = self.settings
        message = serialize_update_message(settings, temperature)
        sent: float = message["update_message"]["control"]["ch_mode_temp"]

        data = await self._api.request(settings.host, PATH_UPDATE, message)
        reply = deserialize_update_reply(data)
        _raise_for_acc_status(reply.acc_status)

        self._last_target_temperature = sent
        _LOGGER.debug("Target temperature set to %.1f", sent)
        return sent

    async def set_target_temperature_for(
        self,
        temperature: float,
        minutes: float,
        restore_to: float | None = None,
    ) -> float:
        """Set a setpoint temporarily and restore the previous one afterwards.

        Only the most recent override is honored: scheduling a new one cancels
        the pending restoration of the previous one.

        Args:
            temperature: Temporary setpoint in degrees Celsius.
            minutes: How long the override lasts.
            restore_to: Setpoint to restore. Defaults to the last known
                setpoint, read from the thermostat if none is known yet.

        Returns:
            The temporary setpoint actually sent to the thermostat.

        Raises:
            InvalidParameterError: If minutes is not positive or a
                temperature is not a number.
            InvalidReplyError: If no setpoint to restore can be determined.
        """
        if minutes <= 0:
            msg = f"Override duration must be positive, got {minutes}"
            raise InvalidParameterError(msg, parameter_name="minutes", value=minutes)

        if restore_to is None:
            restore_to = self._last_target_temperature
        if restore_to is None:
            restore_to = (await self.get_data()).target_temperature
        if restore_to is None:
            msg = "Thermostat did not report a target temperature to restore"
            raise InvalidReplyError(msg)

        previous = clamp_temperature(restore_to)
        sent = await self.set_target_temperature(temperature)

        # A pending restoration is only dropped once the new setpoint is accepted
        await self.cancel_temporary_override()

        async def _restore() -> None:
            _LOGGER.info("Temporary override ended, restoring temperature to %.1f", previous)
            try:
                await self.set_target_temperature(previous)
            except AtagOneError as exc:
                _LOGGER.warning("Failed to restore temperature to %.1f: %s", previous, exc)

        self._override_handle = call_later(minutes * 60, _restore, name="atagone_override_restore")
        _LOGGER.info("Temperature set to %.1f for %s minutes", sent, minutes)
        return sent

    async def cancel_temporary_override(self) -> None:
        """Cancel a pending override restoration, if any."""
        if self._override_handle is not None:
            handle, self._override_handle = self._override_handle, None
            await handle.stop()

    # -------------------------------------------------------------------------
    # String Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        """Return detailed string representation of the client."""
        return f"AtagOneClient(host='{self._settings.host}', mac_address='{self._settings.mac_address}')"
