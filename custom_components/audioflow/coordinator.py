"""Data update coordinator for the Audioflow integration."""

from __future__ import annotations

from datetime import timedelta
import logging

from audioflow_lib import ZoneMirror

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL, DOMAIN, MIN_SCAN_INTERVAL
from .hub import AudioflowHub

_LOGGER = logging.getLogger(__name__)


def scan_interval_for_entry(entry: ConfigEntry) -> timedelta:
    """Return the polling interval configured for an entry."""
    seconds = entry.options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
    return timedelta(seconds=max(int(seconds), MIN_SCAN_INTERVAL))


class AudioflowDataUpdateCoordinator(DataUpdateCoordinator[ZoneMirror]):
    """Drive reconcile passes on a fixed interval."""

    def __init__(
        self,
        hass: HomeAssistant,
        hub: AudioflowHub,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            config_entry=entry,
            update_interval=scan_interval_for_entry(entry),
        )
        self._hub = hub

    @property
    def hub(self) -> AudioflowHub:
        return self._hub

    async def _async_update_data(self) -> ZoneMirror:
        result = await self._hub.async_reconcile()
        if result.error is not None:
            raise UpdateFailed(f"Error communicating with {self._hub.host}: {result.error}")
        if result.skipped:
            _LOGGER.debug("Reconcile pass skipped")
        return self._hub.mirror
