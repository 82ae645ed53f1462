"""Integration tests for pyatagone library.

These tests talk to a real ATAG One thermostat on the local network. They are
marked with @pytest.mark.integration and skipped when no thermostat is
configured.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables required in .env:
    ATAG_ONE_HOST: IP address of the thermostat
    ATAG_ONE_MAC_ADDRESS: MAC address this controller pairs with
    ATAG_ONE_EMAIL: Account email used for pairing
    ATAG_ONE_DEVICE_NAME: Controller name (optional, defaults to "pyatagone")
    ATAG_ONE_PORT: Thermostat port (optional, defaults to 10000)
"""
