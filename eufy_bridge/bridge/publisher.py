"""
MQTT Publisher
==============

Publishes event state, attributes, thumbnails and Home Assistant discovery
announcements over a shared MQTT client.
"""

import json
from typing import Any, Optional

import httpx

from eufy_bridge.bridge.config import BridgeConfig
from eufy_bridge.events import protocol
from eufy_bridge.events.schema import STATE_PAYLOADS, EventAttributes, EventKind
from eufy_bridge.interfaces import DeviceStore, MessageBroker
from eufy_bridge.logging_utils import generate_trace_id, get_component_logger, trace_context

logger = get_component_logger(__name__, "publisher")

ONLINE = "online"


class MqttPublisher:
    """
    Owns every publish made by the bridge.

    The client is injected so the publisher works with aiomqtt in production
    and with a fake broker in tests. Publish errors are not handled here;
    callers decide how to isolate them.

    Args:
        client: MQTT client (MessageBroker protocol)
        registry: Device registry used for discovery (DeviceStore protocol)
        config: BridgeConfig with topic prefixes and QoS
        http_client: httpx client used to download thumbnails

    Example:
        >>> async with aiomqtt.Client("localhost") as client:
        ...     async with httpx.AsyncClient() as http:
        ...         publisher = MqttPublisher(client, registry, config, http)
        ...         await publisher.setup_auto_discovery()
    """

    def __init__(
        self,
        client: MessageBroker,
        registry: DeviceStore,
        config: BridgeConfig,
        http_client: httpx.AsyncClient,
    ):
        self.client = client
        self.registry = registry
        self.config = config
        self.http_client = http_client

    @property
    def status_topic(self) -> str:
        return protocol.status_topic(self.config.discovery_prefix)

    async def subscribe_status(self) -> bool:
        """
        Subscribe to the Home Assistant status topic.

        Failure is logged and reported, not raised: the bridge can still
        publish events without re-announcing discovery.
        """
        try:
            await self.client.subscribe(self.status_topic)
        except Exception as e:
            logger.error(
                f"Error subscribing to {self.status_topic}: {e}",
                extra={"event": "subscribe_failed"},
            )
            return False

        logger.debug(f"Subscribed to {self.status_topic}")
        return True

    async def handle_message(self, topic: str, payload: Any) -> None:
        """
        Route an incoming MQTT message.

        Only "online" on the status topic is acted upon (Home Assistant
        restarted and lost its non-retained entity state).
        """
        text = _decode(payload)
        logger.debug(f"MQTT message: [{topic}]: {text}")

        if topic == self.status_topic and text == ONLINE:
            await self.setup_auto_discovery()

    async def setup_auto_discovery(self) -> int:
        """
        Publish discovery configs for every registered device.

        Devices are announced one after the other. A failing device is logged
        and skipped so the remaining devices are still announced.

        Returns:
            Number of configs published
        """
        published = 0
        with trace_context(generate_trace_id("discovery")):
            devices = await self.registry.get_devices()
            for device in devices:
                try:
                    configs = protocol.discovery_configs(
                        device, self.config.topic_prefix, self.config.discovery_prefix
                    )
                    for announcement in configs:
                        await self.client.publish(
                            announcement.topic,
                            payload=json.dumps(announcement.message),
                            qos=self.config.mqtt_qos,
                            retain=self.config.retain_discovery,
                        )
                        published += 1
                except Exception as e:
                    logger.error(
                        f"Failed to announce device {device.serial}: {e}",
                        extra={"event": "discovery_failed", "device_sn": device.serial},
                    )

            logger.info(
                f"Announced {published} discovery configs for {len(devices)} devices",
                extra={"event": "discovery_published"},
            )
        return published

    async def send_event(self, kind: EventKind, serial: str, attributes: EventAttributes) -> None:
        """
        Publish the state literal and the attributes of an event.

        The two publishes are independent: if the attributes publish fails,
        the state has already been sent.
        """
        prefix = self.config.topic_prefix
        await self.client.publish(
            protocol.state_topic(serial, kind, prefix),
            payload=STATE_PAYLOADS[kind],
            qos=self.config.mqtt_qos,
        )
        await self.client.publish(
            protocol.attributes_topic(serial, kind, prefix),
            payload=attributes.to_json(),
            qos=self.config.mqtt_qos,
        )

    async def send_motion_detected_event(self, serial: str, attributes: EventAttributes) -> None:
        await self.send_event(EventKind.MOTION, serial, attributes)

    async def send_doorbell_pressed_event(self, serial: str, attributes: EventAttributes) -> None:
        await self.send_event(EventKind.DOORBELL, serial, attributes)

    async def send_crying_detected_event(self, serial: str, attributes: EventAttributes) -> None:
        await self.send_event(EventKind.CRYING, serial, attributes)

    async def upload_thumbnail(self, serial: str, thumbnail_url: str) -> int:
        """
        Download a snapshot and republish it as raw bytes.

        Args:
            serial: Device serial
            thumbnail_url: Snapshot URL from the notification

        Returns:
            Size of the published image in bytes

        Raises:
            httpx.HTTPError: If the download fails or returns a non-2xx status
        """
        logger.debug(f"Uploading new thumbnail for {serial} from {thumbnail_url}")

        response = await self.http_client.get(thumbnail_url)
        response.raise_for_status()
        image = response.content

        await self.client.publish(
            protocol.thumbnail_topic(serial, self.config.topic_prefix),
            payload=image,
            qos=self.config.mqtt_qos,
        )
        return len(image)


def _decode(payload: Any) -> Optional[str]:
    if isinstance(payload, (bytes, bytearray)):
        return payload.decode("utf-8", errors="replace")
    if payload is None:
        return None
    return str(payload)
