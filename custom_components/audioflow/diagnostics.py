"""Diagnostics support for Audioflow."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import CONF_SERIAL, DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import AudioflowDataUpdateCoordinator
from .hub import AudioflowHub

TO_REDACT = {CONF_SERIAL, "serial"}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    hub: AudioflowHub | None = data.get(DATA_HUB) if data else None
    coordinator: AudioflowDataUpdateCoordinator | None = (
        data.get(DATA_COORDINATOR) if data else None
    )
    mirror = hub.mirror if hub is not None else None

    return {
        "entry_id": entry.entry_id,
        "data": async_redact_data(dict(entry.data), TO_REDACT),
        "options": dict(entry.options),
        "last_update_success": (
            coordinator.last_update_success if coordinator is not None else None
        ),
        "zone_labels": dict(hub.settings.labels) if hub is not None else {},
        "mirror": async_redact_data(_to_jsonable(mirror), TO_REDACT),
    }


def _to_jsonable(value: Any) -> Any:
    """Normalize mirror dataclasses to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
