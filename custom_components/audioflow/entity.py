"""Shared entity helpers for the Audioflow integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST
from homeassistant.helpers.device_registry import DeviceInfo

from .const import DOMAIN, MANUFACTURER
from .hub import AudioflowHub, device_identifier


def device_info_for_entry(hub: AudioflowHub, entry: ConfigEntry) -> DeviceInfo:
    """Build device info for entities tied to a config entry."""
    switch = hub.mirror.switch
    return DeviceInfo(
        identifiers={(DOMAIN, device_identifier(entry))},
        manufacturer=MANUFACTURER,
        name=entry.title,
        model=hub.model or (switch.model if switch is not None else None),
        serial_number=hub.serial or None,
        configuration_url=f"http://{hub.host}",
    )


def unique_base(entry: ConfigEntry) -> str:
    """Return the stable unique ID base for this config entry."""
    if entry.unique_id:
        return entry.unique_id
    return entry.data[CONF_HOST]


def build_unique_id(base: str, domain: str, numeric_id: int | str) -> str:
    """Build a stable unique ID in <base>:<domain>:<id> format."""
    return f"{base}:{domain}:{numeric_id}"
