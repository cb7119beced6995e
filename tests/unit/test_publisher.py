"""
Unit tests for MqttPublisher
"""

import json

import httpx
import pytest
import respx

from eufy_bridge.bridge import BridgeConfig, DeviceRegistry, MqttPublisher
from eufy_bridge.events import DeviceRecord, EventAttributes, protocol


async def register(registry: DeviceRegistry, *records: DeviceRecord) -> None:
    for record in records:
        await registry.create_or_update_device(record)


FRONT_DOOR = DeviceRecord(serial="T8210P1", name="Front Door", model="T8210")
HALL_SENSOR = DeviceRecord(serial="T8910P1", name="Hall", model="T8910")


class TestStatusMessages:
    @pytest.mark.asyncio
    async def test_online_triggers_discovery(self, broker, registry, publisher):
        await register(registry, FRONT_DOOR)

        await publisher.handle_message("homeassistant/status", b"online")

        assert broker.topics() == [
            "homeassistant/binary_sensor/eufy_T8210P1/motion/config",
            "homeassistant/binary_sensor/eufy_T8210P1/doorbell/config",
            "homeassistant/camera/eufy_T8210P1/thumbnail/config",
        ]

    @pytest.mark.asyncio
    async def test_offline_does_not_trigger_discovery(self, broker, registry, publisher):
        await register(registry, FRONT_DOOR)

        await publisher.handle_message("homeassistant/status", b"offline")

        assert broker.published == []

    @pytest.mark.asyncio
    async def test_online_on_other_topic_is_ignored(self, broker, registry, publisher):
        await register(registry, FRONT_DOOR)

        await publisher.handle_message("eufy/status", "online")

        assert broker.published == []

    @pytest.mark.asyncio
    async def test_custom_discovery_prefix(self, broker, registry, http_client):
        config = BridgeConfig(discovery_prefix="ha")
        publisher = MqttPublisher(broker, registry, config, http_client)
        await register(registry, HALL_SENSOR)

        await publisher.handle_message("ha/status", b"online")

        assert broker.topics() == ["ha/binary_sensor/eufy_T8910P1/motion/config"]

    @pytest.mark.asyncio
    async def test_subscribe_status(self, broker, publisher):
        assert await publisher.subscribe_status() is True
        assert broker.subscriptions == ["homeassistant/status"]

    @pytest.mark.asyncio
    async def test_subscribe_failure_is_not_fatal(self, broker_factory, registry, config, http_client):
        broker = broker_factory(fail_subscribe=True)
        publisher = MqttPublisher(broker, registry, config, http_client)

        assert await publisher.subscribe_status() is False


class TestAutoDiscovery:
    @pytest.mark.asyncio
    async def test_configs_are_retained_json(self, broker, registry, publisher):
        await register(registry, HALL_SENSOR)

        published = await publisher.setup_auto_discovery()

        assert published == 1
        topic, payload, qos, retain = broker.published[0]
        assert retain is True
        assert json.loads(payload)["state_topic"] == "eufy/T8910P1/motion/state"

    @pytest.mark.asyncio
    async def test_devices_announced_in_registry_order(self, broker, registry, publisher):
        await register(registry, HALL_SENSOR, FRONT_DOOR)

        assert await publisher.setup_auto_discovery() == 4
        assert broker.topics()[0] == "homeassistant/binary_sensor/eufy_T8910P1/motion/config"

    @pytest.mark.asyncio
    async def test_failing_device_does_not_stop_others(self, broker_factory, registry, config, http_client):
        broker = broker_factory(fail_topics={"eufy_T8210P1"})
        publisher = MqttPublisher(broker, registry, config, http_client)
        await register(registry, FRONT_DOOR, HALL_SENSOR)

        published = await publisher.setup_auto_discovery()

        assert published == 1
        assert broker.topics() == ["homeassistant/binary_sensor/eufy_T8910P1/motion/config"]

    @pytest.mark.asyncio
    async def test_config_build_error_does_not_stop_others(self, broker, registry, publisher, monkeypatch):
        build = protocol.discovery_configs

        def failing_for_front_door(device, *args, **kwargs):
            if device.serial == FRONT_DOOR.serial:
                raise ValueError("bad device")
            return build(device, *args, **kwargs)

        monkeypatch.setattr(protocol, "discovery_configs", failing_for_front_door)
        await register(registry, FRONT_DOOR, HALL_SENSOR)

        published = await publisher.setup_auto_discovery()

        assert published == 1
        assert broker.topics() == ["homeassistant/binary_sensor/eufy_T8910P1/motion/config"]

    @pytest.mark.asyncio
    async def test_repeated_announcements_are_identical(self, broker, registry, publisher):
        await register(registry, FRONT_DOOR)

        await publisher.setup_auto_discovery()
        first = list(broker.published)
        broker.published.clear()
        await publisher.setup_auto_discovery()

        assert broker.published == first

    @pytest.mark.asyncio
    async def test_empty_registry(self, broker, publisher):
        assert await publisher.setup_auto_discovery() == 0
        assert broker.published == []


class TestSendEvents:
    @pytest.mark.asyncio
    async def test_motion_event(self, broker, publisher):
        await publisher.send_motion_detected_event(
            "T1", EventAttributes(event_time=5, thumbnail="http://x/1.jpg")
        )

        assert broker.published[0] == ("eufy/T1/motion/state", "motion", 0, False)
        assert json.loads(broker.published[1][1]) == {"event_time": 5, "thumbnail": "http://x/1.jpg"}

    @pytest.mark.asyncio
    async def test_doorbell_event_uses_motion_literal(self, broker, publisher):
        await publisher.send_doorbell_pressed_event("T1", EventAttributes())

        assert broker.payload_for("eufy/T1/doorbell/state") == "motion"

    @pytest.mark.asyncio
    async def test_crying_event(self, broker, publisher):
        await publisher.send_crying_detected_event("T1", EventAttributes(event_time=7))

        assert broker.payload_for("eufy/T1/crying/state") == "crying"
        assert json.loads(broker.payload_for("eufy/T1/crying/attributes")) == {"event_time": 7}

    @pytest.mark.asyncio
    async def test_qos_from_config(self, broker, registry, http_client):
        publisher = MqttPublisher(broker, registry, BridgeConfig(mqtt_qos=1), http_client)

        await publisher.send_motion_detected_event("T1", EventAttributes())

        assert {qos for _, _, qos, _ in broker.published} == {1}


class TestUploadThumbnail:
    @pytest.mark.asyncio
    @respx.mock
    async def test_publishes_raw_bytes(self, broker, registry, config):
        respx.get("http://cdn.test/snap.jpg").respond(200, content=b"\x89PNG")

        async with httpx.AsyncClient() as http:
            publisher = MqttPublisher(broker, registry, config, http)
            size = await publisher.upload_thumbnail("T1", "http://cdn.test/snap.jpg")

        assert size == 4
        assert broker.published == [("eufy/T1/thumbnail", b"\x89PNG", 0, False)]

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_propagates(self, broker, registry, config):
        respx.get("http://cdn.test/gone.jpg").respond(500)

        async with httpx.AsyncClient() as http:
            publisher = MqttPublisher(broker, registry, config, http)
            with pytest.raises(httpx.HTTPStatusError):
                await publisher.upload_thumbnail("T1", "http://cdn.test/gone.jpg")

        assert broker.published == []
