"""Buttons for Audioflow switch-wide actions."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from audioflow_lib import AudioflowError

from homeassistant.components.button import (
    ButtonDeviceClass,
    ButtonEntity,
    ButtonEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import AudioflowDataUpdateCoordinator
from .entity import build_unique_id, device_info_for_entry, unique_base
from .hub import AudioflowHub


@dataclass(frozen=True, slots=True, kw_only=True)
class AudioflowButtonDescription(ButtonEntityDescription):
    """Describe an Audioflow button."""

    key: str
    press_fn: Callable[[AudioflowHub], Awaitable[Any]]
    refresh: bool = True


BUTTONS: tuple[AudioflowButtonDescription, ...] = (
    AudioflowButtonDescription(
        key="all_zones_off",
        translation_key="all_zones_off",
        press_fn=lambda hub: hub.dispatcher.async_all_zones_off(),
    ),
    AudioflowButtonDescription(
        key="reboot",
        translation_key="reboot",
        device_class=ButtonDeviceClass.RESTART,
        entity_category=EntityCategory.CONFIG,
        press_fn=lambda hub: hub.dispatcher.async_reboot(),
        refresh=False,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Audioflow buttons from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: AudioflowHub = data[DATA_HUB]
    coordinator: AudioflowDataUpdateCoordinator = data[DATA_COORDINATOR]
    async_add_entities(
        AudioflowButton(coordinator, hub, entry, description) for description in BUTTONS
    )


class AudioflowButton(CoordinatorEntity[AudioflowDataUpdateCoordinator], ButtonEntity):
    """Representation of an Audioflow button."""

    _attr_has_entity_name = True
    entity_description: AudioflowButtonDescription

    def __init__(
        self,
        coordinator: AudioflowDataUpdateCoordinator,
        hub: AudioflowHub,
        entry: ConfigEntry,
        description: AudioflowButtonDescription,
    ) -> None:
        """Initialize the button."""
        super().__init__(coordinator)
        self.entity_description = description
        self._hub = hub
        self._attr_unique_id = build_unique_id(unique_base(entry), "button", description.key)
        self._attr_device_info = device_info_for_entry(hub, entry)

    async def async_press(self) -> None:
        """Run the button action."""
        try:
            await self.entity_description.press_fn(self._hub)
        except AudioflowError as err:
            raise HomeAssistantError(f"{self.entity_description.key} failed: {err}") from err
        if self.entity_description.refresh:
            await self.coordinator.async_request_refresh()
