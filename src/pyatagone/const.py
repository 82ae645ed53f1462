"""Constants for pyatagone library."""

from __future__ import annotations


# Transport Configuration
DEFAULT_PORT = 10000
DEFAULT_TIMEOUT = 10  # seconds

# Endpoint paths
PATH_PAIR = "/pair_message"
PATH_RETRIEVE = "/retrieve"
PATH_UPDATE = "/update"

# Every message carries a sequence number; the device does not require it to increment
DEFAULT_SEQUENCE_NUMBER = 1

# Account types for pair entries
ACCOUNT_TYPE_USER = 0
ACCOUNT_TYPE_SERVICE = 1

# Temperature Validation
TEMPERATURE_MIN = 4.0
TEMPERATURE_MAX = 27.0
TEMPERATURE_STEP = 0.5

# Boiler status bits (report.boiler_status)
BOILER_STATUS_HOT_WATER = 4
BOILER_STATUS_CENTRAL_HEATING = 8

# Authorization polling
DEFAULT_AUTH_MAX_ATTEMPTS = 30
DEFAULT_AUTH_INTERVAL = 2.0  # seconds

# Poller Configuration
DEFAULT_POLL_INTERVAL = 60  # seconds
POLL_INTERVAL_MIN = 10
POLL_INTERVAL_MAX = 300
