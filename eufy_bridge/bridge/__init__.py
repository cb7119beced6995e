"""
Bridge Service
==============

Connects to the MQTT broker, publishes push-notification events and
announces devices to Home Assistant.
"""

from eufy_bridge.bridge.config import BridgeConfig, ConfigValidationError
from eufy_bridge.bridge.connection import BusConnection, create_client
from eufy_bridge.bridge.device_sync import DeviceSync
from eufy_bridge.bridge.dispatcher import EventDispatcher, EventOutcome, classify
from eufy_bridge.bridge.publisher import MqttPublisher
from eufy_bridge.bridge.registry import DeviceRegistry

__all__ = [
    "BridgeConfig",
    "ConfigValidationError",
    "BusConnection",
    "create_client",
    "DeviceSync",
    "EventDispatcher",
    "EventOutcome",
    "classify",
    "MqttPublisher",
    "DeviceRegistry",
]
