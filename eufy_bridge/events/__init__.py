"""
Event Protocol for Eufy Bridge
===============================

Push-notification normalization, MQTT message schemas and topic utilities.
"""

from eufy_bridge.events.normalizer import normalize
from eufy_bridge.events.protocol import (
    base_topic,
    crying_detected_base_topic,
    discovery_configs,
    doorbell_pressed_base_topic,
    motion_detected_base_topic,
    status_topic,
    thumbnail_topic,
)
from eufy_bridge.events.schema import (
    SUPPORTED_DEVICES,
    DeviceRecord,
    DeviceType,
    DiscoveryConfig,
    EventAttributes,
    EventKind,
    NormalizedEvent,
    NotificationType,
)

__all__ = [
    "normalize",
    "base_topic",
    "motion_detected_base_topic",
    "doorbell_pressed_base_topic",
    "crying_detected_base_topic",
    "thumbnail_topic",
    "status_topic",
    "discovery_configs",
    "DeviceRecord",
    "DeviceType",
    "DiscoveryConfig",
    "EventAttributes",
    "EventKind",
    "NormalizedEvent",
    "NotificationType",
    "SUPPORTED_DEVICES",
]
