"""Device triggers for Audioflow zone transitions."""

from __future__ import annotations

from typing import Any

from audioflow_lib import EVENT_ZONE_TURNED_OFF, EVENT_ZONE_TURNED_ON
from audioflow_lib.types import SUPPORTED_ZONE_COUNTS
import voluptuous as vol

from homeassistant.components.device_automation import DEVICE_TRIGGER_BASE_SCHEMA
from homeassistant.components.homeassistant.triggers import event as event_trigger
from homeassistant.const import CONF_DEVICE_ID, CONF_DOMAIN, CONF_PLATFORM, CONF_TYPE
from homeassistant.core import CALLBACK_TYPE, HomeAssistant
from homeassistant.helpers.trigger import TriggerActionType, TriggerInfo
from homeassistant.helpers.typing import ConfigType

from .const import ATTR_ZONE, DOMAIN, EVENT_AUDIOFLOW

TRIGGER_TYPES = (EVENT_ZONE_TURNED_ON, EVENT_ZONE_TURNED_OFF)

# Zone numbers travel on the event bus as strings.
_ZONE_SCHEMA = vol.All(
    vol.Coerce(int), vol.Range(min=1, max=max(SUPPORTED_ZONE_COUNTS)), vol.Coerce(str)
)

TRIGGER_SCHEMA = DEVICE_TRIGGER_BASE_SCHEMA.extend(
    {
        vol.Required(CONF_TYPE): vol.In(TRIGGER_TYPES),
        vol.Optional(ATTR_ZONE): _ZONE_SCHEMA,
    }
)


async def async_get_triggers(
    hass: HomeAssistant, device_id: str
) -> list[dict[str, Any]]:
    """List zone triggers for an Audioflow device."""
    return [
        {
            CONF_PLATFORM: "device",
            CONF_DOMAIN: DOMAIN,
            CONF_DEVICE_ID: device_id,
            CONF_TYPE: trigger_type,
        }
        for trigger_type in TRIGGER_TYPES
    ]


async def async_get_trigger_capabilities(
    hass: HomeAssistant, config: ConfigType
) -> dict[str, vol.Schema]:
    """Allow narrowing a trigger to one zone."""
    return {"extra_fields": vol.Schema({vol.Optional(ATTR_ZONE): _ZONE_SCHEMA})}


async def async_attach_trigger(
    hass: HomeAssistant,
    config: ConfigType,
    action: TriggerActionType,
    trigger_info: TriggerInfo,
) -> CALLBACK_TYPE:
    """Listen for zone events fired by the reconcile engine."""
    event_data: dict[str, Any] = {
        CONF_DEVICE_ID: config[CONF_DEVICE_ID],
        CONF_TYPE: config[CONF_TYPE],
    }
    if ATTR_ZONE in config:
        event_data[ATTR_ZONE] = config[ATTR_ZONE]
    event_config = event_trigger.TRIGGER_SCHEMA(
        {
            event_trigger.CONF_PLATFORM: "event",
            event_trigger.CONF_EVENT_TYPE: EVENT_AUDIOFLOW,
            event_trigger.CONF_EVENT_DATA: event_data,
        }
    )
    return await event_trigger.async_attach_trigger(
        hass, event_config, action, trigger_info, platform_type="device"
    )
