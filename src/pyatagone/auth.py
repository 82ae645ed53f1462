"""Pairing handshake with ATAG One thermostats."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pyatagone.const import DEFAULT_AUTH_INTERVAL, DEFAULT_AUTH_MAX_ATTEMPTS, PATH_PAIR
from pyatagone.exceptions import AuthorizationTimeoutError, InvalidParameterError, InvalidReplyError
from pyatagone.models import AuthStatus
from pyatagone.serializers import deserialize_pair_reply, serialize_pair_message


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pyatagone.api import AtagOneAPI
    from pyatagone.models import ConnectionSettings

_LOGGER = logging.getLogger(__name__)


class AuthorizationHandler:
    """Drive the pairing handshake required before retrieve/update calls succeed.

    A new account is only authorized after somebody presses "YES" on the
    thermostat. Pair requests are repeated at a fixed interval until the
    device reports a final answer.

    Example:
        ```python
        handler = AuthorizationHandler(api)

        def show(status: AuthStatus) -> None:
            if status == AuthStatus.PENDING:
                print("Press YES on the thermostat")

        status = await handler.wait_for_authorization(settings, on_status=show)
        ```
    """

    def __init__(
        self,
        api: AtagOneAPI,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the authorization handler.

        Args:
            api: Transport used for pair requests.
            sleep: Coroutine function used to wait between attempts.
        """
        self._api = api
        self._sleep = sleep

    async def request_pairing(self, settings: ConnectionSettings) -> AuthStatus:
        """Send one pair request and return the resulting status.

        Args:
            settings: Connection settings of the account to pair.

        Returns:
            Authorization status reported by the thermostat.

        Raises:
            InvalidReplyError: If the reply carries no ``acc_status``.
            AtagConnectionError: If the thermostat cannot be reached.
            AtagTimeoutError: If the thermostat does not answer in time.
            MalformedReplyError: If the reply is not a pair reply.
        """
        data = await self._api.request(settings.host, PATH_PAIR, serialize_pair_message(settings))
        reply = deserialize_pair_reply(data)

        if reply.acc_status is None:
            msg = "Invalid pair response: missing acc_status"
            raise InvalidReplyError(msg)

        _LOGGER.debug("Pair request for %s returned %s", settings.email, reply.acc_status.name)
        return reply.acc_status

    async def wait_for_authorization(
        self,
        settings: ConnectionSettings,
        max_attempts: int = DEFAULT_AUTH_MAX_ATTEMPTS,
        interval: float = DEFAULT_AUTH_INTERVAL,
        on_status: Callable[[AuthStatus], None] | None = None,
    ) -> AuthStatus:
        """Poll the pairing status until it is granted, denied or attempts run out.

        Args:
            settings: Connection settings of the account to pair.
            max_attempts: Maximum number of pair requests to send.
            interval: Seconds to wait between attempts.
            on_status: Optional callback invoked with every status received.

        Returns:
            AuthStatus.GRANTED or AuthStatus.DENIED.

        Raises:
            InvalidParameterError: If max_attempts or interval is out of range.
            AuthorizationTimeoutError: If no final answer arrived in time.
            AtagConnectionError: If the thermostat cannot be reached.
            AtagTimeoutError: If the thermostat does not answer in time.
        """
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise InvalidParameterError(msg, parameter_name="max_attempts", value=max_attempts)

        if interval < 0:
            msg = f"interval must not be negative, got {interval}"
            raise InvalidParameterError(msg, parameter_name="interval", value=interval)

        for attempt in range(max_attempts):
            status = await self.request_pairing(settings)

            if on_status is not None:
                on_status(status)

            if status in (AuthStatus.GRANTED, AuthStatus.DENIED):
                _LOGGER.info("Authorization %s after %d attempt(s)", status.name.lower(), attempt + 1)
                return status

            if attempt < max_attempts - 1:
                _LOGGER.debug(
                    "Authorization %s (attempt %d/%d), retrying in %.1fs",
                    status.name,
                    attempt + 1,
                    max_attempts,
                    interval,
                )
                await self._sleep(interval)

        _LOGGER.warning("Authorization not granted after %d attempts", max_attempts)
        msg = "Authorization timeout"
        raise AuthorizationTimeoutError(msg, attempts=max_attempts)
