"""Data models for ATAG One requests, replies and change events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any


__all__ = [
    "AuthStatus",
    "BoilerStarted",
    "BoilerStatus",
    "BoilerStopped",
    "ChangeEvent",
    "ConnectionSettings",
    "DeviceSnapshot",
    "MessageInfo",
    "PairReply",
    "PressureBelowThreshold",
    "PressureChanged",
    "RetrieveReply",
    "RoomTemperatureChanged",
    "TargetTemperatureChanged",
    "UpdateReply",
]


class AuthStatus(IntEnum):
    """Authorization status reported in ``acc_status``."""

    NOT_AVAILABLE = 0
    PENDING = 1
    GRANTED = 2
    DENIED = 3


class MessageInfo(IntFlag):
    """Sub-reports that can be requested in a retrieve message."""

    CONTROL = 1
    SCHEDULES = 2
    CONFIGURATION = 4
    REPORT = 8
    STATUS = 16
    WIFI = 32
    DETAILS = 64


@dataclass
class ConnectionSettings:
    """Connection settings for one thermostat.

    Attributes:
        host: IP address or hostname of the thermostat.
        mac_address: Hardware address, uppercase without separators.
        device_name: Name this controller registers under on the thermostat.
        email: Account email used for pairing and authentication.
    """

    host: str
    mac_address: str
    device_name: str
    email: str


@dataclass(frozen=True)
class BoilerStatus:
    """Decoded ``boiler_status`` bitmask.

    Attributes:
        heating: Central heating is active.
        hot_water: Domestic hot water is active.
    """

    heating: bool = False
    hot_water: bool = False

    @property
    def flame_on(self) -> bool:
        """Check if the burner is firing for either purpose."""
        return self.heating or self.hot_water


@dataclass(frozen=True)
class PairReply:
    """Reply to a pair message."""

    seqnr: int | None
    acc_status: AuthStatus | None


@dataclass(frozen=True)
class UpdateReply:
    """Reply to an update message."""

    seqnr: int | None
    acc_status: AuthStatus | None


@dataclass(frozen=True)
class RetrieveReply:
    """Reply to a retrieve message.

    Sub-reports the device did not include are empty dicts.

    Attributes:
        seqnr: Sequence number echoed by the device.
        acc_status: Authorization status of the requesting account, if reported.
        status: ``status`` sub-report (device id, connection status, ...).
        report: ``report`` sub-report (temperatures, pressures, boiler status, ...).
        control: ``control`` sub-report (setpoints and modes).
    """

    seqnr: int | None
    acc_status: AuthStatus | None
    status: dict[str, Any] = field(default_factory=dict)
    report: dict[str, Any] = field(default_factory=dict)
    control: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeviceSnapshot:
    """Point-in-time read of thermostat state.

    Numeric values are ``None`` when the thermostat omitted them.

    Attributes:
        device_id: Device identifier reported in the status sub-report.
        room_temperature: Measured room temperature in degrees Celsius.
        target_temperature: Current central heating setpoint in degrees Celsius.
        outside_temperature: Outside temperature in degrees Celsius.
        water_pressure: Central heating water pressure in bar.
        boiler_heating: Central heating is active.
        hot_water_active: Domestic hot water is active.
        flame_on: Burner is firing.
        raw_data: Decoded retrieve reply for debugging.
    """

    device_id: str | None = None
    room_temperature: float | None = None
    target_temperature: float | None = None
    outside_temperature: float | None = None
    water_pressure: float | None = None
    boiler_heating: bool = False
    hot_water_active: bool = False
    flame_on: bool = False
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class ChangeEvent:
    """Base class for events emitted by the poller."""


@dataclass(frozen=True)
class RoomTemperatureChanged(ChangeEvent):
    """Measured room temperature changed."""

    temperature: float


@dataclass(frozen=True)
class TargetTemperatureChanged(ChangeEvent):
    """Setpoint changed, either from this client or on the device."""

    temperature: float


@dataclass(frozen=True)
class PressureChanged(ChangeEvent):
    """Water pressure (bar) changed."""

    pressure: float


@dataclass(frozen=True)
class PressureBelowThreshold(ChangeEvent):
    """Water pressure observation for low-pressure checks.

    Attributes:
        pressure: Observed pressure in bar.
        threshold: Threshold configured on the poller, or None when the
            consumer applies its own.
    """

    pressure: float
    threshold: float | None = None

    def is_below(self, threshold: float) -> bool:
        """Check the observed pressure against a consumer threshold."""
        return self.pressure < threshold


@dataclass(frozen=True)
class BoilerStarted(ChangeEvent):
    """Central heating switched on."""


@dataclass(frozen=True)
class BoilerStopped(ChangeEvent):
    """Central heating switched off."""
