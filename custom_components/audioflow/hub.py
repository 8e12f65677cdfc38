"""Hub wiring one Audioflow switch into Home Assistant."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from audioflow_lib import (
    AudioflowClient,
    AudioflowDiscovery,
    AudioflowSettingsWriteError,
    IntentDispatcher,
    ReconcileEngine,
    ReconcileResult,
    ZoneEvent,
    ZoneMirror,
    enabled_setting_key,
    zone_count_for_model,
)

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST
from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    CONF_MODEL,
    CONF_SERIAL,
    DOMAIN,
    EVENT_AUDIOFLOW,
)

_LOGGER = logging.getLogger(__name__)


def device_identifier(entry: ConfigEntry) -> str:
    """Return the device registry identifier for a config entry."""
    return entry.unique_id or entry.entry_id


class EntryOptionsStore:
    """Settings store backed by the config entry options."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self._hass = hass
        self._entry = entry
        self.labels: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._entry.options.get(key, default)

    async def async_set(self, values: Mapping[str, Any]) -> None:
        if self._hass.config_entries.async_get_entry(self._entry.entry_id) is None:
            raise AudioflowSettingsWriteError(
                f"Config entry {self._entry.entry_id} no longer exists"
            )
        self._hass.config_entries.async_update_entry(
            self._entry, options={**self._entry.options, **values}
        )

    async def async_set_label(self, key: str, text: str) -> None:
        self.labels[key] = text


class HassEventSink:
    """Fire zone transitions on the Home Assistant event bus."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self._hass = hass
        self._entry = entry

    async def async_fire(self, event: ZoneEvent) -> None:
        registry = dr.async_get(self._hass)
        device = registry.async_get_device(
            identifiers={(DOMAIN, device_identifier(self._entry))}
        )
        self._hass.bus.async_fire(
            EVENT_AUDIOFLOW,
            {
                "device_id": device.id if device is not None else None,
                "type": event.kind,
                **event.state,
                **event.tokens,
            },
        )


class AudioflowHub:
    """Own the client, zone mirror, engine and dispatcher of one switch."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self._hass = hass
        self._entry = entry
        self.settings = EntryOptionsStore(hass, entry)
        self.events = HassEventSink(hass, entry)
        self.mirror = ZoneMirror.seed(
            zone_count_for_model(entry.data.get(CONF_MODEL)),
            lambda zone: self.settings.get(enabled_setting_key(zone), True),
        )
        self._discovery = AudioflowDiscovery()
        self._build(entry.data[CONF_HOST])

    def _build(self, host: str) -> None:
        self.client = AudioflowClient(host, async_get_clientsession(self._hass))
        self.engine = ReconcileEngine(self.client, self.mirror, self.settings, self.events)
        self.dispatcher = IntentDispatcher(self.client, self.mirror)

    @property
    def host(self) -> str:
        return self.client.host

    @property
    def model(self) -> str | None:
        return self._entry.data.get(CONF_MODEL)

    @property
    def serial(self) -> str | None:
        return self._entry.data.get(CONF_SERIAL)

    async def async_reconcile(self) -> ReconcileResult:
        return await self.engine.async_reconcile()

    async def async_repair_address(self) -> bool:
        """Rediscover the switch by serial and adopt its new address."""
        serial = self.serial
        if not serial:
            return False
        _LOGGER.debug("Looking for %s on the network", serial)
        device = await self._discovery.async_find_serial(serial)
        if device is None or device.address == self.host:
            return False
        _LOGGER.info("Switch %s moved from %s to %s", serial, self.host, device.address)
        self._hass.config_entries.async_update_entry(
            self._entry, data={**self._entry.data, CONF_HOST: device.address}
        )
        self.engine.shutdown()
        self._build(device.address)
        return True

    def shutdown(self) -> None:
        self.engine.shutdown()
        self._discovery.close()
