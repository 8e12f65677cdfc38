"""Set up the Audioflow integration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_VENDOR_PATH = Path(__file__).resolve().parent / "vendor" / "audioflow"
if _VENDOR_PATH.exists() and str(_VENDOR_PATH) not in sys.path:
    sys.path.insert(0, str(_VENDOR_PATH))

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import AudioflowDataUpdateCoordinator, scan_interval_for_entry
from .hub import AudioflowHub

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.BUTTON,
    Platform.SWITCH,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Audioflow from a config entry."""
    hub = AudioflowHub(hass, entry)
    coordinator = AudioflowDataUpdateCoordinator(hass, hub, entry)
    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady:
        _LOGGER.debug("First poll of %s failed; trying rediscovery", hub.host)
        if not await hub.async_repair_address():
            hub.shutdown()
            raise
        try:
            await coordinator.async_config_entry_first_refresh()
        except ConfigEntryNotReady:
            hub.shutdown()
            raise

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload an Audioflow config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        coordinator: AudioflowDataUpdateCoordinator | None = data.get(DATA_COORDINATOR)
        hub: AudioflowHub | None = data.get(DATA_HUB)
        if coordinator is not None:
            await coordinator.async_shutdown()
        if hub is not None:
            hub.shutdown()
    return unload_ok


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply a changed polling interval."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    if data is None:
        return
    coordinator: AudioflowDataUpdateCoordinator = data[DATA_COORDINATOR]
    interval = scan_interval_for_entry(entry)
    if coordinator.update_interval != interval:
        _LOGGER.debug("Polling interval changed to %s", interval)
        coordinator.update_interval = interval
