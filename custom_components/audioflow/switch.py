"""Switches for Audioflow speaker zones."""

from __future__ import annotations

import logging
from typing import Any

from audioflow_lib import AudioflowError

from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import AudioflowDataUpdateCoordinator
from .entity import build_unique_id, device_info_for_entry, unique_base
from .hub import AudioflowHub

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up zone switches, following each zone's visibility."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: AudioflowHub = data[DATA_HUB]
    coordinator: AudioflowDataUpdateCoordinator = data[DATA_COORDINATOR]
    registry = er.async_get(hass)
    base = unique_base(entry)
    known_zones: set[int] = set()

    @callback
    def _async_sync_zones() -> None:
        entities: list[AudioflowZoneSwitch] = []
        for zone in hub.mirror.zones.values():
            if zone.visible and zone.index not in known_zones:
                known_zones.add(zone.index)
                entities.append(AudioflowZoneSwitch(coordinator, hub, entry, zone.index))
            elif not zone.visible and zone.index in known_zones:
                known_zones.discard(zone.index)
                unique_id = build_unique_id(base, "zone", zone.index)
                entity_id = registry.async_get_entity_id(Platform.SWITCH, DOMAIN, unique_id)
                if entity_id is not None:
                    _LOGGER.debug("Removing %s because zone %s is disabled", entity_id, zone.index)
                    registry.async_remove(entity_id)
        if entities:
            _LOGGER.debug("Adding %s zone switches", len(entities))
            async_add_entities(entities)

    _async_sync_zones()
    entry.async_on_unload(coordinator.async_add_listener(_async_sync_zones))


class AudioflowZoneSwitch(CoordinatorEntity[AudioflowDataUpdateCoordinator], SwitchEntity):
    """One speaker zone of the switch."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: AudioflowDataUpdateCoordinator,
        hub: AudioflowHub,
        entry: ConfigEntry,
        zone: int,
    ) -> None:
        """Initialize the zone switch."""
        super().__init__(coordinator)
        self._hub = hub
        self._zone = zone
        self._attr_unique_id = build_unique_id(unique_base(entry), "zone", zone)
        self._attr_device_info = device_info_for_entry(hub, entry)

    @property
    def name(self) -> str:
        return self._hub.mirror.zone_name(self._zone)

    @property
    def is_on(self) -> bool | None:
        entry = self._hub.mirror.get(self._zone)
        if entry is None:
            return None
        return entry.on

    @property
    def available(self) -> bool:
        entry = self._hub.mirror.get(self._zone)
        return super().available and entry is not None and entry.visible

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        return {"zone": self._zone}

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the zone on."""
        await self._async_set_state(True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the zone off."""
        await self._async_set_state(False)

    async def _async_set_state(self, on: bool) -> None:
        try:
            await self._hub.dispatcher.async_set_zone_state(self._zone, on)
        except AudioflowError as err:
            raise HomeAssistantError(
                f"Failed to turn {'on' if on else 'off'} {self.name}: {err}"
            ) from err
        await self.coordinator.async_request_refresh()
