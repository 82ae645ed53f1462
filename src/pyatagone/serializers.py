"""Serialization and deserialization of ATAG One wire messages.

This module holds all knowledge of the JSON envelopes the thermostat speaks.
It provides stateless functions for building the three request messages
(pair, retrieve, update) and for turning their replies into typed models.

Design Philosophy:
    - Stateless functions (no classes, no state)
    - No I/O; the transport hands over decoded JSON and gets dicts back
    - Bit-twiddling of the boiler status bitmask stays in here
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from pyatagone.const import (
    ACCOUNT_TYPE_USER,
    BOILER_STATUS_CENTRAL_HEATING,
    BOILER_STATUS_HOT_WATER,
    DEFAULT_SEQUENCE_NUMBER,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    TEMPERATURE_STEP,
)
from pyatagone.exceptions import InvalidParameterError, InvalidReplyError, MalformedReplyError
from pyatagone.models import (
    AuthStatus,
    BoilerStatus,
    DeviceSnapshot,
    MessageInfo,
    PairReply,
    RetrieveReply,
    UpdateReply,
)


if TYPE_CHECKING:
    from pyatagone.models import ConnectionSettings


def normalize_mac_address(mac_address: str) -> str:
    """Normalize a MAC address to uppercase hex without separators.

    Example:
        >>> normalize_mac_address("aa:bb-cc-dd-ee-ff")
        'AABBCCDDEEFF'
    """
    return mac_address.replace(":", "").replace("-", "").upper()


def clamp_temperature(temperature: float) -> float:
    """Round a setpoint to 0.5 degree steps and clamp it to the device range.

    Halves round up, matching the thermostat's own controls. Infinite values
    clamp to the nearest bound.

    Raises:
        InvalidParameterError: If the temperature is NaN.

    Example:
        >>> clamp_temperature(20.3)
        20.5
        >>> clamp_temperature(35)
        27.0
    """
    if math.isnan(temperature):
        msg = "Temperature must be a number, got NaN"
        raise InvalidParameterError(msg, parameter_name="temperature", value=temperature)
    bounded = max(TEMPERATURE_MIN, min(TEMPERATURE_MAX, temperature))
    return math.floor(bounded / TEMPERATURE_STEP + 0.5) * TEMPERATURE_STEP


def _account_auth(settings: ConnectionSettings) -> dict[str, str]:
    return {
        "user_account": settings.email,
        "mac_address": settings.mac_address,
    }


def serialize_pair_message(settings: ConnectionSettings) -> dict[str, Any]:
    """Serialize a pair request for ``/pair_message``.

    Args:
        settings: Connection settings of the requesting account.

    Returns:
        Pair message envelope with a single user account entry.
    """
    return {
        "pair_message": {
            "seqnr": DEFAULT_SEQUENCE_NUMBER,
            "account_auth": _account_auth(settings),
            "accounts": {
                "entries": [
                    {
                        "user_account": settings.email,
                        "mac_address": settings.mac_address,
                        "device_name": settings.device_name,
                        "account_type": ACCOUNT_TYPE_USER,
                    }
                ]
            },
        }
    }


def serialize_retrieve_message(settings: ConnectionSettings, info: MessageInfo | int) -> dict[str, Any]:
    """Serialize a retrieve request for ``/retrieve``.

    Args:
        settings: Connection settings of the requesting account.
        info: Bitmask of sub-reports to include in the reply.

    Returns:
        Retrieve message envelope.

    Example:
        >>> message = serialize_retrieve_message(settings, MessageInfo.CONTROL | MessageInfo.REPORT)
        >>> message["retrieve_message"]["info"]
        9
    """
    return {
        "retrieve_message": {
            "seqnr": DEFAULT_SEQUENCE_NUMBER,
            "account_auth": _account_auth(settings),
            "info": int(info),
        }
    }


def serialize_update_message(settings: ConnectionSettings, temperature: float) -> dict[str, Any]:
    """Serialize a setpoint update for ``/update``.

    The temperature is clamped and rounded before it goes on the wire.

    Args:
        settings: Connection settings of the requesting account.
        temperature: Requested central heating setpoint in degrees Celsius.

    Returns:
        Update message envelope.
    """
    return {
        "update_message": {
            "seqnr": DEFAULT_SEQUENCE_NUMBER,
            "account_auth": _account_auth(settings),
            "control": {"ch_mode_temp": clamp_temperature(temperature)},
        }
    }


def _unwrap(data: Any, key: str) -> dict[str, Any]:
    if not isinstance(data, dict) or not isinstance(data.get(key), dict):
        msg = f"Reply is missing '{key}'"
        raise MalformedReplyError(msg)
    reply: dict[str, Any] = data[key]
    return reply


def _parse_acc_status(value: Any) -> AuthStatus | None:
    if value is None:
        return None
    # bool is an int subclass, but never a valid status
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Invalid acc_status: {value!r}"
        raise InvalidReplyError(msg)
    try:
        return AuthStatus(value)
    except ValueError as exc:
        msg = f"Unknown acc_status: {value}"
        raise InvalidReplyError(msg) from exc


def _sub_report(reply: dict[str, Any], key: str) -> dict[str, Any]:
    section = reply.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        msg = f"Invalid '{key}' section in retrieve reply"
        raise InvalidReplyError(msg)
    return section


def deserialize_pair_reply(data: Any) -> PairReply:
    """Deserialize a ``pair_reply`` envelope.

    Raises:
        MalformedReplyError: If the ``pair_reply`` envelope is missing.
        InvalidReplyError: If ``acc_status`` is not a known status code.
    """
    reply = _unwrap(data, "pair_reply")
    return PairReply(seqnr=reply.get("seqnr"), acc_status=_parse_acc_status(reply.get("acc_status")))


def deserialize_update_reply(data: Any) -> UpdateReply:
    """Deserialize an ``update_reply`` envelope.

    Raises:
        MalformedReplyError: If the ``update_reply`` envelope is missing.
        InvalidReplyError: If ``acc_status`` is not a known status code.
    """
    reply = _unwrap(data, "update_reply")
    return UpdateReply(seqnr=reply.get("seqnr"), acc_status=_parse_acc_status(reply.get("acc_status")))


def deserialize_retrieve_reply(data: Any) -> RetrieveReply:
    """Deserialize a ``retrieve_reply`` envelope.

    Args:
        data: Decoded JSON body in format:
              {"retrieve_reply": {"seqnr": int, "status": {...}, "report": {...},
               "control": {...}, "acc_status": int}}

    Returns:
        RetrieveReply with missing sub-reports as empty dicts.

    Raises:
        MalformedReplyError: If the ``retrieve_reply`` envelope is missing.
        InvalidReplyError: If a sub-report or ``acc_status`` has the wrong shape.
    """
    reply = _unwrap(data, "retrieve_reply")
    return RetrieveReply(
        seqnr=reply.get("seqnr"),
        acc_status=_parse_acc_status(reply.get("acc_status")),
        status=_sub_report(reply, "status"),
        report=_sub_report(reply, "report"),
        control=_sub_report(reply, "control"),
    )


def deserialize_boiler_status(bitmask: int | None) -> BoilerStatus:
    """Decode the ``report.boiler_status`` bitmask.

    Example:
        >>> deserialize_boiler_status(8)
        BoilerStatus(heating=True, hot_water=False)
    """
    if bitmask is not None and not isinstance(bitmask, int):
        msg = f"Invalid boiler_status: {bitmask!r}"
        raise InvalidReplyError(msg)
    value = bitmask or 0
    return BoilerStatus(
        heating=bool(value & BOILER_STATUS_CENTRAL_HEATING),
        hot_water=bool(value & BOILER_STATUS_HOT_WATER),
    )


def deserialize_device_snapshot(reply: RetrieveReply) -> DeviceSnapshot:
    """Build a DeviceSnapshot from a retrieve reply.

    Args:
        reply: Reply to a retrieve message that requested at least the
            CONTROL, REPORT and STATUS sub-reports.

    Returns:
        DeviceSnapshot with pressure in bar.
    """
    boiler = deserialize_boiler_status(reply.report.get("boiler_status"))

    return DeviceSnapshot(
        device_id=reply.status.get("device_id"),
        room_temperature=reply.report.get("room_temp"),
        target_temperature=reply.control.get("ch_mode_temp"),
        outside_temperature=reply.report.get("outside_temp"),
        water_pressure=reply.report.get("ch_water_pres"),
        boiler_heating=boiler.heating,
        hot_water_active=boiler.hot_water,
        flame_on=boiler.flame_on,
        raw_data={
            "status": reply.status,
            "report": reply.report,
            "control": reply.control,
        },
    )
