"""Config flow for the Audioflow integration."""

from __future__ import annotations

import logging
from typing import Any

from audioflow_lib import (
    AudioflowClient,
    AudioflowDiscovery,
    AudioflowError,
    DiscoveredDevice,
    EXCLUSIVE_MODE_KEY,
    enabled_setting_key,
)
from audioflow_lib.types import device_id_for
import voluptuous as vol

from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_HOST
from homeassistant.core import callback
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    CONF_DEVICE,
    CONF_MODEL,
    CONF_SCAN_INTERVAL,
    CONF_SERIAL,
    CONF_ZONE_NAME_PREFIX,
    DATA_COORDINATOR,
    DATA_HUB,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    MAX_SCAN_INTERVAL,
    MIN_SCAN_INTERVAL,
    zone_name_option_key,
)

_LOGGER = logging.getLogger(__name__)

MANUAL_ENTRY = "manual"

STEP_MANUAL_DATA_SCHEMA = vol.Schema({vol.Required(CONF_HOST): cv.string})


class AudioflowConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Audioflow."""

    VERSION = 1
    MINOR_VERSION = 1

    def __init__(self) -> None:
        """Initialize the flow."""
        self._discovered: dict[str, DiscoveredDevice] = {}
        self._discovery = AudioflowDiscovery()

    @callback
    def async_remove(self) -> None:
        """Release the discovery socket when the flow goes away."""
        self._discovery.close()

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> AudioflowOptionsFlow:
        """Return the options flow."""
        return AudioflowOptionsFlow(config_entry)

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Look for switches on the local network."""
        devices = await self._discovery.async_discover()
        configured = self._async_current_ids()
        self._discovered = {
            device.id: device for device in devices if device.id not in configured
        }
        if not self._discovered:
            return await self.async_step_manual()
        return await self.async_step_pick_device()

    async def async_step_pick_device(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Let the user pick a discovered switch."""
        if user_input is not None:
            choice = user_input[CONF_DEVICE]
            if choice == MANUAL_ENTRY:
                return await self.async_step_manual()
            device = self._discovered[choice]
            await self.async_set_unique_id(device.id)
            self._abort_if_unique_id_configured(updates={CONF_HOST: device.address})
            return self._async_create_entry(
                host=device.address, model=device.model, serial=device.serial
            )

        options = {
            device.id: f"{device.name} ({device.address})"
            for device in self._discovered.values()
        }
        options[MANUAL_ENTRY] = "Enter address manually"
        return self.async_show_form(
            step_id="pick_device",
            data_schema=vol.Schema({vol.Required(CONF_DEVICE): vol.In(options)}),
        )

    async def async_step_manual(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Add a switch by address."""
        errors: dict[str, str] = {}
        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            try:
                model, serial = await _async_fetch_switch(self, host)
            except AudioflowError as err:
                _LOGGER.debug("Cannot reach %s: %s", host, err)
                errors["base"] = "cannot_connect"
            else:
                await self.async_set_unique_id(device_id_for(serial, host))
                self._abort_if_unique_id_configured(updates={CONF_HOST: host})
                return self._async_create_entry(host=host, model=model, serial=serial)

        return self.async_show_form(
            step_id="manual",
            data_schema=STEP_MANUAL_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reconfigure(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Find a switch whose address changed, falling back to manual entry."""
        entry = self._get_reconfigure_entry()
        errors: dict[str, str] = {}
        if user_input is None:
            serial = entry.data.get(CONF_SERIAL)
            device = await self._discovery.async_find_serial(serial) if serial else None
            if device is not None:
                return self.async_update_reload_and_abort(
                    entry, data_updates={CONF_HOST: device.address}
                )
        else:
            host = user_input[CONF_HOST].strip()
            try:
                _, serial = await _async_fetch_switch(self, host)
            except AudioflowError as err:
                _LOGGER.debug("Cannot reach %s: %s", host, err)
                errors["base"] = "cannot_connect"
            else:
                if serial and entry.data.get(CONF_SERIAL) and serial != entry.data[CONF_SERIAL]:
                    errors["base"] = "wrong_device"
                else:
                    return self.async_update_reload_and_abort(
                        entry, data_updates={CONF_HOST: host}
                    )

        return self.async_show_form(
            step_id="reconfigure",
            data_schema=vol.Schema(
                {vol.Required(CONF_HOST, default=entry.data[CONF_HOST]): cv.string}
            ),
            errors=errors,
        )

    @callback
    def _async_create_entry(self, *, host: str, model: str, serial: str) -> ConfigFlowResult:
        return self.async_create_entry(
            title=f"Audioflow {model}" if model else f"Audioflow {host}",
            data={CONF_HOST: host, CONF_MODEL: model, CONF_SERIAL: serial},
            options={CONF_SCAN_INTERVAL: DEFAULT_SCAN_INTERVAL},
        )


async def _async_fetch_switch(flow: ConfigFlow, host: str) -> tuple[str, str]:
    """Return the model and serial reported by the switch at `host`."""
    client = AudioflowClient(host, async_get_clientsession(flow.hass))
    switch = await client.async_get_switch()
    return switch.model or "", switch.serial or ""


class AudioflowOptionsFlow(OptionsFlow):
    """Zone enable flags, zone names, exclusive mode and polling interval."""

    def __init__(self, config_entry: ConfigEntry) -> None:
        """Initialize options flow."""
        super().__init__()
        self._config_entry = config_entry

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Show and apply the settings form."""
        data = self.hass.data.get(DOMAIN, {}).get(self._config_entry.entry_id)
        if data is None:
            return self.async_abort(reason="not_loaded")
        hub = data[DATA_HUB]
        mirror = hub.mirror
        current = self._current_settings(mirror)
        errors: dict[str, str] = {}

        if user_input is not None:
            try:
                await self._async_write_hardware(hub, current, user_input)
            except AudioflowError as err:
                _LOGGER.warning("Failed to apply settings to %s: %s", hub.host, err)
                errors["base"] = "cannot_connect"
            else:
                await data[DATA_COORDINATOR].async_request_refresh()
                options = {
                    key: value
                    for key, value in user_input.items()
                    if not key.startswith(CONF_ZONE_NAME_PREFIX)
                }
                return self.async_create_entry(data={**self._config_entry.options, **options})
            current = {**current, **user_input}

        schema: dict[Any, Any] = {}
        for zone in range(1, mirror.zone_count + 1):
            enabled_key = enabled_setting_key(zone)
            name_key = zone_name_option_key(zone)
            schema[vol.Required(enabled_key, default=current[enabled_key])] = bool
            schema[vol.Required(name_key, default=current[name_key])] = vol.All(
                cv.string, vol.Length(min=1, max=15)
            )
        schema[vol.Required(EXCLUSIVE_MODE_KEY, default=current[EXCLUSIVE_MODE_KEY])] = bool
        schema[vol.Required(CONF_SCAN_INTERVAL, default=current[CONF_SCAN_INTERVAL])] = vol.All(
            vol.Coerce(int), vol.Range(min=MIN_SCAN_INTERVAL, max=MAX_SCAN_INTERVAL)
        )
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(schema),
            errors=errors,
        )

    def _current_settings(self, mirror: Any) -> dict[str, Any]:
        options = self._config_entry.options
        current: dict[str, Any] = {}
        for zone in range(1, mirror.zone_count + 1):
            current[enabled_setting_key(zone)] = options.get(enabled_setting_key(zone), True)
            current[zone_name_option_key(zone)] = mirror.zone_name(zone)
        exclusive = options.get(EXCLUSIVE_MODE_KEY, mirror.exclusive)
        current[EXCLUSIVE_MODE_KEY] = bool(exclusive)
        current[CONF_SCAN_INTERVAL] = options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
        return current

    async def _async_write_hardware(
        self, hub: Any, current: dict[str, Any], user_input: dict[str, Any]
    ) -> None:
        """Push changed names and flags to the switch before storing options."""
        applied = dict(current)
        for zone in range(1, hub.mirror.zone_count + 1):
            name_key = zone_name_option_key(zone)
            enabled_key = enabled_setting_key(zone)
            name = user_input.get(name_key, current[name_key])
            if name == current[name_key]:
                continue
            enabled = user_input.get(enabled_key, current[enabled_key])
            await hub.dispatcher.async_set_zone_name(zone, name, enabled)
            applied[enabled_key] = enabled
        await hub.dispatcher.async_apply_settings(applied, user_input)
