from __future__ import annotations

from pathlib import Path
import sys
from types import SimpleNamespace

import pytest

pytest.importorskip("homeassistant")

from audioflow_lib import ZoneEvent  # noqa: E402
from audioflow_lib.errors import AudioflowSettingsWriteError  # noqa: E402

import audioflow_lib  # noqa: E402
import voluptuous as vol  # noqa: E402

import custom_components.audioflow as integration  # noqa: E402
from custom_components.audioflow import device_trigger, hub as hub_module  # noqa: E402
from custom_components.audioflow.config_flow import AudioflowConfigFlow  # noqa: E402
from custom_components.audioflow.const import EVENT_AUDIOFLOW  # noqa: E402


class _FakeConfigEntries:
    def __init__(self, entry) -> None:
        self._entry = entry
        self.updates = []

    def async_get_entry(self, entry_id):
        if self._entry is not None and self._entry.entry_id == entry_id:
            return self._entry
        return None

    def async_update_entry(self, entry, *, options=None, data=None):
        self.updates.append({"options": options, "data": data})
        if options is not None:
            entry.options = options
        if data is not None:
            entry.data = data
        return True


class _FakeBus:
    def __init__(self) -> None:
        self.fired = []

    def async_fire(self, event_type, event_data):
        self.fired.append((event_type, event_data))


class _FakeDeviceRegistry:
    def __init__(self, device_id) -> None:
        self._device_id = device_id
        self.lookups = []

    def async_get_device(self, identifiers):
        self.lookups.append(identifiers)
        if self._device_id is None:
            return None
        return SimpleNamespace(id=self._device_id)


def _entry(options=None):
    return SimpleNamespace(
        entry_id="entry-1",
        unique_id="AF1",
        title="Audioflow 3S-4Z",
        data={"host": "10.0.0.5", "model": "3S-4Z", "serial": "AF1"},
        options=dict(options or {}),
    )


def _hass(entry):
    return SimpleNamespace(config_entries=_FakeConfigEntries(entry), bus=_FakeBus())


@pytest.mark.asyncio
async def test_entry_options_store_merges_options():
    entry = _entry({"scan_interval": 5})
    hass = _hass(entry)
    store = hub_module.EntryOptionsStore(hass, entry)

    await store.async_set({"enabled_zone1": False})
    await store.async_set_label("enabled_zone1", "Enable Kitchen")

    assert entry.options == {"scan_interval": 5, "enabled_zone1": False}
    assert store.get("enabled_zone1") is False
    assert store.get("enabled_zone2", True) is True
    assert store.labels == {"enabled_zone1": "Enable Kitchen"}


@pytest.mark.asyncio
async def test_entry_options_store_refuses_removed_entry():
    entry = _entry()
    hass = SimpleNamespace(config_entries=_FakeConfigEntries(None), bus=_FakeBus())
    store = hub_module.EntryOptionsStore(hass, entry)

    with pytest.raises(AudioflowSettingsWriteError):
        await store.async_set({"enabled_zone1": False})
    assert entry.options == {}


@pytest.mark.asyncio
async def test_event_sink_fires_bus_event_with_device_id(monkeypatch):
    entry = _entry()
    hass = _hass(entry)
    registry = _FakeDeviceRegistry("device-1")
    monkeypatch.setattr(hub_module.dr, "async_get", lambda _hass: registry)
    sink = hub_module.HassEventSink(hass, entry)

    await sink.async_fire(ZoneEvent(kind="zone_turned_on", zone=2, zone_name="Patio"))

    assert hass.bus.fired == [
        (
            EVENT_AUDIOFLOW,
            {"device_id": "device-1", "type": "zone_turned_on", "zone": "2", "zone_name": "Patio"},
        )
    ]
    assert registry.lookups == [{("audioflow", "AF1")}]


def test_device_identifier_falls_back_to_entry_id():
    entry = _entry()
    entry.unique_id = None

    assert hub_module.device_identifier(entry) == "entry-1"


class _FakeDiscovery:
    def __init__(self) -> None:
        self.closed = False

    def close(self):
        self.closed = True


def test_trigger_zone_is_matched_as_string():
    assert device_trigger._ZONE_SCHEMA(2) == "2"
    assert device_trigger._ZONE_SCHEMA("3") == "3"
    with pytest.raises(vol.Invalid):
        device_trigger._ZONE_SCHEMA(5)


def test_config_flow_remove_closes_discovery():
    flow = AudioflowConfigFlow()
    discovery = _FakeDiscovery()
    flow._discovery = discovery

    flow.async_remove()

    assert discovery.closed is True


@pytest.mark.asyncio
async def test_hub_shutdown_closes_discovery(monkeypatch):
    entry = _entry()
    hass = _hass(entry)
    monkeypatch.setattr(hub_module, "async_get_clientsession", lambda _hass: object())
    hub = hub_module.AudioflowHub(hass, entry)
    discovery = _FakeDiscovery()
    hub._discovery = discovery

    hub.shutdown()

    assert discovery.closed is True
    assert (await hub.async_reconcile()).skipped is True


def test_library_is_loaded_from_vendor_directory():
    assert str(integration._VENDOR_PATH) in sys.path
    assert Path(audioflow_lib.__file__).resolve().parent.parent == integration._VENDOR_PATH
