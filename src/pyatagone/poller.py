"""Recurring state polling with change detection for an ATAG One thermostat.

The poller fetches a :class:`~pyatagone.models.DeviceSnapshot` at a fixed
interval, compares it with the previous successfully fetched snapshot and
emits :class:`~pyatagone.models.ChangeEvent` objects to registered listeners.
It also reports availability transitions so a host integration can mark the
device online or offline with a helpful reason.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pyatagone.const import DEFAULT_POLL_INTERVAL, POLL_INTERVAL_MAX, POLL_INTERVAL_MIN
from pyatagone.exceptions import AtagOneError, AuthorizationError, InvalidParameterError
from pyatagone.models import (
    BoilerStarted,
    BoilerStopped,
    PressureBelowThreshold,
    PressureChanged,
    RoomTemperatureChanged,
    TargetTemperatureChanged,
)
from pyatagone.scheduler import call_every


if TYPE_CHECKING:
    from collections.abc import Callable

    from pyatagone.client import AtagOneClient
    from pyatagone.models import ChangeEvent, DeviceSnapshot
    from pyatagone.scheduler import ScheduledHandle

_LOGGER = logging.getLogger(__name__)

CONNECTION_FAILED_REASON = "Connection failed. Check that the thermostat is reachable on the network."


def diff_snapshots(
    previous: DeviceSnapshot | None,
    current: DeviceSnapshot,
    pressure_threshold: float | None = None,
) -> list[ChangeEvent]:
    """Compute the change events between two snapshots.

    Values the thermostat omitted (None) never produce events. The pressure
    threshold check runs on every observation, whether or not the pressure
    changed, so a consumer sees readings that sit below its threshold.

    Args:
        previous: Last successfully fetched snapshot, or None for the first poll.
        current: Newly fetched snapshot.
        pressure_threshold: Emit PressureBelowThreshold only below this
            pressure (bar). If None, it is emitted for every observation and
            the consumer applies its own threshold.

    Returns:
        Change events in a stable order; empty when there is no previous snapshot.
    """
    if previous is None:
        return []

    events: list[ChangeEvent] = []

    room = current.room_temperature
    if room is not None and previous.room_temperature is not None and room != previous.room_temperature:
        events.append(RoomTemperatureChanged(room))

    target = current.target_temperature
    if target is not None and previous.target_temperature is not None and target != previous.target_temperature:
        events.append(TargetTemperatureChanged(target))

    pressure = current.water_pressure
    if pressure is not None:
        if previous.water_pressure is not None and pressure != previous.water_pressure:
            events.append(PressureChanged(pressure))
        if pressure_threshold is None or pressure < pressure_threshold:
            events.append(PressureBelowThreshold(pressure, pressure_threshold))

    if current.boiler_heating != previous.boiler_heating:
        events.append(BoilerStarted() if current.boiler_heating else BoilerStopped())

    return events


def unavailable_reason(exc: BaseException) -> str:
    """Describe why the thermostat is unavailable in user-facing terms.

    Authorization problems tell the user to (re-)pair; everything else
    points at connectivity.
    """
    if isinstance(exc, AuthorizationError):
        return str(exc)
    return CONNECTION_FAILED_REASON


def _validate_interval(interval: float) -> None:
    if not POLL_INTERVAL_MIN <= interval <= POLL_INTERVAL_MAX:
        msg = f"Poll interval must be {POLL_INTERVAL_MIN}-{POLL_INTERVAL_MAX} seconds, got {interval}"
        raise InvalidParameterError(msg, parameter_name="interval", value=interval)


class AtagOnePoller:
    """Periodically poll a thermostat and emit change events.

    Example:
        ```python
        def on_event(event: ChangeEvent) -> None:
            if isinstance(event, BoilerStarted):
                print("Boiler started heating")

        def on_availability(available: bool, reason: str | None) -> None:
            print("online" if available else f"offline: {reason}")

        poller = AtagOnePoller(client, interval=30, pressure_threshold=1.0)
        poller.add_listener(on_event)
        poller.add_availability_listener(on_availability)
        await poller.start()
        ...
        await poller.stop()
        ```
    """

    def __init__(
        self,
        client: AtagOneClient,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        pressure_threshold: float | None = None,
    ) -> None:
        """Initialize the poller.

        Args:
            client: Client for the thermostat to poll.
            interval: Seconds between polls (10-300).
            pressure_threshold: Optional low-pressure threshold in bar.

        Raises:
            InvalidParameterError: If interval is out of range.
        """
        _validate_interval(interval)

        self._client = client
        self._interval = interval
        self.pressure_threshold = pressure_threshold

        self._previous: DeviceSnapshot | None = None
        self._available: bool | None = None
        self._unavailable_reason: str | None = None
        self._handle: ScheduledHandle | None = None

        self._listeners: list[Callable[[ChangeEvent], None]] = []
        self._availability_listeners: list[Callable[[bool, str | None], None]] = []

    @property
    def interval(self) -> float:
        """Get the poll interval in seconds."""
        return self._interval

    @property
    def running(self) -> bool:
        """Check if the recurring poll is scheduled."""
        return self._handle is not None and not self._handle.cancelled and not self._handle.done

    @property
    def last_snapshot(self) -> DeviceSnapshot | None:
        """Get the last successfully fetched snapshot."""
        return self._previous

    @property
    def available(self) -> bool | None:
        """Get the availability from the last poll (None before the first poll)."""
        return self._available

    @property
    def unavailable_reason(self) -> str | None:
        """Get the reason the thermostat is unavailable, if it is."""
        return self._unavailable_reason

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    async def poll(self) -> list[ChangeEvent]:
        """Fetch one snapshot, emit change events and report availability.

        On failure nothing is emitted, the previous snapshot is kept for the
        next comparison and the error is re-raised after availability
        listeners have been told.

        Returns:
            Change events emitted by this poll.
        """
        try:
            snapshot = await self._client.get_data()
        except Exception as exc:
            self._set_unavailable(unavailable_reason(exc))
            raise

        events = diff_snapshots(self._previous, snapshot, self.pressure_threshold)
        self._previous = snapshot

        _LOGGER.debug("Polled thermostat: %s (%d event(s))", snapshot, len(events))

        self._set_available()
        for event in events:
            self._notify_listeners(event)

        return events

    async def _poll_cycle(self) -> None:
        try:
            await self.poll()
        except AtagOneError as exc:
            _LOGGER.warning("Failed to poll thermostat: %s", exc)

    async def start(self, *, immediate: bool = True) -> None:
        """Start polling in the background.

        Args:
            immediate: Poll right away instead of waiting one interval first.
        """
        await self.stop()
        self._handle = call_every(self._interval, self._poll_cycle, name="atagone_poller", immediate=immediate)
        _LOGGER.info("Started polling with interval: %ss", self._interval)

    async def stop(self) -> None:
        """Stop polling.

        A poll that is already running may complete, but no further poll
        is started.
        """
        if self._handle is not None:
            handle, self._handle = self._handle, None
            await handle.stop()
            _LOGGER.info("Polling stopped")

    async def set_interval(self, interval: float) -> None:
        """Change the poll interval, restarting the schedule if it is running.

        Raises:
            InvalidParameterError: If interval is out of range.
        """
        _validate_interval(interval)
        self._interval = interval
        if self.running:
            await self.start(immediate=False)

    # -------------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------------

    def _set_available(self) -> None:
        if self._available is True:
            return
        self._available = True
        self._unavailable_reason = None
        _LOGGER.info("Thermostat available")
        self._notify_availability(True, None)

    def _set_unavailable(self, reason: str) -> None:
        if self._available is False and self._unavailable_reason == reason:
            return
        self._available = False
        self._unavailable_reason = reason
        _LOGGER.warning("Thermostat unavailable: %s", reason)
        self._notify_availability(False, reason)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, callback: Callable[[ChangeEvent], None]) -> None:
        """Register a callback for change events."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[ChangeEvent], None]) -> None:
        """Unregister a change event callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def add_availability_listener(self, callback: Callable[[bool, str | None], None]) -> None:
        """Register a callback for availability transitions.

        The callback receives ``(available, reason)``; reason is None when
        the thermostat became available.
        """
        if callback not in self._availability_listeners:
            self._availability_listeners.append(callback)

    def remove_availability_listener(self, callback: Callable[[bool, str | None], None]) -> None:
        """Unregister an availability callback."""
        if callback in self._availability_listeners:
            self._availability_listeners.remove(callback)

    def _notify_listeners(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _LOGGER.exception("Error in change listener for %s", type(event).__name__)

    def _notify_availability(self, available: bool, reason: str | None) -> None:
        for listener in list(self._availability_listeners):
            try:
                listener(available, reason)
            except Exception:
                _LOGGER.exception("Error in availability listener")
