"""Constants for the Audioflow integration."""

from __future__ import annotations

DOMAIN = "audioflow"
MANUFACTURER = "Audioflow"

DATA_HUB = "hub"
DATA_COORDINATOR = "coordinator"

CONF_MODEL = "model"
CONF_SERIAL = "serial"
CONF_DEVICE = "device"
CONF_SCAN_INTERVAL = "scan_interval"
CONF_ZONE_NAME_PREFIX = "zone_name"

DEFAULT_SCAN_INTERVAL = 5
MIN_SCAN_INTERVAL = 2
MAX_SCAN_INTERVAL = 300

EVENT_AUDIOFLOW = "audioflow_event"
ATTR_ZONE = "zone"


def zone_name_option_key(zone: int) -> str:
    """Return the options form field holding a zone's name."""
    return f"{CONF_ZONE_NAME_PREFIX}{zone}"
