"""
Eufy MQTT Bridge
================

Publishes Eufy camera and doorbell push notifications to an MQTT broker and
announces the devices to Home Assistant through MQTT discovery.

Usage:
    from eufy_bridge.bridge import (
        BridgeConfig, BusConnection, DeviceRegistry, EventDispatcher, MqttPublisher,
    )

    config = BridgeConfig(mqtt_host="localhost", registry_path="devices.json")
    registry = DeviceRegistry(config.registry_path)
    registry.load()

    connection = BusConnection(config)
    async with httpx.AsyncClient() as http:
        publisher = MqttPublisher(connection.client, registry, config, http)
        dispatcher = EventDispatcher(publisher)
        await connection.run(publisher)
"""

from eufy_bridge.events import DeviceRecord, EventKind, NormalizedEvent, NotificationType, normalize

__version__ = "0.1.0"

__all__ = [
    "DeviceRecord",
    "EventKind",
    "NormalizedEvent",
    "NotificationType",
    "normalize",
]
