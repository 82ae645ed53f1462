"""Low-level transport for the ATAG One local HTTP interface.

This module performs single JSON-over-HTTP exchanges with the thermostat.
It knows nothing about message contents; it posts a payload and hands back
the decoded JSON object, mapping every failure to a typed exception.
"""

from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from pyatagone.const import DEFAULT_PORT, DEFAULT_TIMEOUT
from pyatagone.exceptions import AtagConnectionError, AtagTimeoutError, MalformedReplyError


if TYPE_CHECKING:
    from types import TracebackType

_LOGGER = logging.getLogger(__name__)


class AtagOneAPI:
    """Low-level HTTP transport for ATAG One thermostats.

    Each call to :meth:`request` is exactly one POST. There are no retries
    here; callers decide on their own cadence. Requests through one
    transport never overlap.

    Example:
        ```python
        from aiohttp import ClientSession
        from pyatagone.api import AtagOneAPI

        async with ClientSession() as session:
            api = AtagOneAPI(session=session)
            reply = await api.request("192.168.1.20", "/retrieve", message)
        ```

    Attributes:
        port: TCP port of the thermostat's HTTP interface (default: 10000).
        timeout: Overall bound in seconds for one exchange.
    """

    def __init__(
        self,
        *,
        session: ClientSession | None = None,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            port: Port the thermostat listens on.
            timeout: Overall timeout in seconds for a single exchange.
        """
        self._session = session
        self._owns_session = session is None
        self.port = port
        self.timeout = timeout

        # The thermostat serializes requests; keep at most one in flight
        self._request_lock = asyncio.Lock()

    async def __aenter__(self) -> AtagOneAPI:
        """Enter the context manager, creating a session if needed."""
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Closes session if it was created by this transport.
        """
        await self.close()

    async def close(self) -> None:
        """Close the session if this transport owns it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _url(self, host: str, path: str) -> str:
        return f"http://{host}:{self.port}{path}"

    async def request(self, host: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Post a JSON message to the thermostat and return the decoded reply.

        Args:
            host: IP address or hostname of the thermostat.
            path: Endpoint path (e.g., "/retrieve").
            payload: Message envelope to serialize as the JSON body.

        Returns:
            Decoded JSON object from the reply body.

        Raises:
            RuntimeError: If session is not initialized or is closed.
            AtagTimeoutError: If no reply arrives within the timeout.
            AtagConnectionError: If the connection fails or the status is not 200.
            MalformedReplyError: If the body is not a JSON object.
        """
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)

        url = self._url(host, path)
        timeout = ClientTimeout(total=self.timeout)

        _LOGGER.debug("POST %s: %s", url, payload)

        try:
            async with (
                self._request_lock,
                self._session.post(url, json=payload, timeout=timeout) as response,
            ):
                if response.status != HTTPStatus.OK:
                    msg = f"Connection failed: {path} returned HTTP {response.status}"
                    raise AtagConnectionError(msg)

                # The thermostat does not always send a JSON content type
                data = await response.json(content_type=None)

        # aiohttp timeouts are also ClientErrors
        except TimeoutError as exc:
            msg = f"Request timeout after {self.timeout}s for {url}"
            raise AtagTimeoutError(msg) from exc

        except ClientError as exc:
            msg = f"Connection error: {exc}"
            raise AtagConnectionError(msg) from exc

        except ValueError as exc:
            msg = f"Failed to parse reply from {path}: {exc}"
            raise MalformedReplyError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Failed to parse reply from {path}: expected a JSON object"
            raise MalformedReplyError(msg)

        _LOGGER.debug("Reply from %s: %s", url, data)
        return data
