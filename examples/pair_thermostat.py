"""Pair this controller with an ATAG One thermostat.

Run once per controller. The thermostat shows a prompt; press "YES" on it
within a minute to authorize.
"""

import asyncio

from pyatagone import AtagOneClient, AuthorizationTimeoutError, AuthStatus


def show_status(status: AuthStatus) -> None:
    """Print each pairing status as it comes in."""
    if status == AuthStatus.PENDING:
        print("Waiting for approval... press YES on the thermostat")
    else:
        print(f"Status: {status.name}")


async def main() -> None:
    """Request pairing and wait for the user to approve it."""
    # Replace with your thermostat details
    async with AtagOneClient(
        host="192.168.1.20",
        mac_address="aa:bb:cc:dd:ee:ff",
        device_name="pyatagone",
        email="your@email.com",
    ) as client:
        try:
            status = await client.wait_for_authorization(on_status=show_status)
        except AuthorizationTimeoutError as err:
            print(f"Nobody approved the request after {err.attempts} attempts")
            return

        if status == AuthStatus.GRANTED:
            print("Paired. You can now read and control the thermostat.")
        else:
            print("Pairing was denied on the thermostat.")


if __name__ == "__main__":
    asyncio.run(main())
