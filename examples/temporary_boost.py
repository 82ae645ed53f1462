"""Temporarily raise the setpoint using an application-managed session.

The session injection pattern matches integrations (such as Home Assistant)
where the application owns the aiohttp session.
"""

import asyncio

from aiohttp import ClientSession

from pyatagone import AtagOneClient


async def main() -> None:
    """Boost the setpoint for a few minutes, then let the client restore it."""
    async with ClientSession() as session:
        client = AtagOneClient(
            host="192.168.1.20",
            mac_address="aa:bb:cc:dd:ee:ff",
            device_name="pyatagone",
            email="your@email.com",
            session=session,  # Inject existing session
        )

        async with client:
            snapshot = await client.get_data()
            print(f"Current setpoint: {snapshot.target_temperature}°C")

            sent = await client.set_target_temperature_for(22.3, minutes=2)
            print(f"Boosted to {sent}°C for 2 minutes")

            # The restoration runs in the background while the client is open
            while client.override_pending:
                await asyncio.sleep(10)

            snapshot = await client.get_data()
            print(f"Setpoint restored to {snapshot.target_temperature}°C")

        # Session remains open after client exits
        print("Client closed, session still available for other requests")


if __name__ == "__main__":
    asyncio.run(main())
