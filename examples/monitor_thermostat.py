"""Monitor an ATAG One thermostat example.

This example demonstrates:
- Polling the thermostat in the background
- Reacting to temperature, pressure and boiler events
- Alerting on low water pressure
- Tracking availability
"""

import asyncio
import logging
from datetime import datetime

from pyatagone import (
    AtagOneClient,
    AtagOnePoller,
    BoilerStarted,
    BoilerStopped,
    ChangeEvent,
    PressureBelowThreshold,
    PressureChanged,
    RoomTemperatureChanged,
    TargetTemperatureChanged,
)


LOW_PRESSURE_BAR = 1.0


def on_event(event: ChangeEvent) -> None:
    """Print a line for each change event."""
    now = datetime.now().strftime("%H:%M:%S")

    if isinstance(event, RoomTemperatureChanged):
        print(f"[{now}] Room temperature: {event.temperature}°C")
    elif isinstance(event, TargetTemperatureChanged):
        print(f"[{now}] Setpoint: {event.temperature}°C")
    elif isinstance(event, PressureChanged):
        print(f"[{now}] Water pressure: {event.pressure} bar")
    elif isinstance(event, PressureBelowThreshold):
        print(f"[{now}] ⚠️  LOW PRESSURE: {event.pressure} bar (below {event.threshold} bar)")
    elif isinstance(event, BoilerStarted):
        print(f"[{now}] Boiler started heating")
    elif isinstance(event, BoilerStopped):
        print(f"[{now}] Boiler stopped heating")


def on_availability(available: bool, reason: str | None) -> None:
    """Print availability transitions."""
    if available:
        print("Thermostat online")
    else:
        print(f"Thermostat offline: {reason}")


async def main() -> None:
    """Main monitoring function."""
    logging.basicConfig(level=logging.INFO)

    # Replace with your thermostat details
    async with AtagOneClient(
        host="192.168.1.20",
        mac_address="aa:bb:cc:dd:ee:ff",
        device_name="pyatagone",
        email="your@email.com",
    ) as client:
        snapshot = await client.get_data()
        print(f"Device:     {snapshot.device_id}")
        print(f"Room:       {snapshot.room_temperature}°C")
        print(f"Setpoint:   {snapshot.target_temperature}°C")
        print(f"Outside:    {snapshot.outside_temperature}°C")
        print(f"Pressure:   {snapshot.water_pressure} bar")
        print(f"Flame:      {'ON' if snapshot.flame_on else 'OFF'}")

        poller = AtagOnePoller(client, interval=30, pressure_threshold=LOW_PRESSURE_BAR)
        poller.add_listener(on_event)
        poller.add_availability_listener(on_availability)

        print("\nMonitoring every 30 seconds... (Press Ctrl+C to stop)")
        await poller.start()
        try:
            await asyncio.Event().wait()
        finally:
            await poller.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting...")
