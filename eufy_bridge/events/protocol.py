"""
MQTT Protocol Utilities
========================

Topic naming conventions and Home Assistant discovery payloads.

Every function here is pure: topics depend only on the device serial, the
event kind and the configured prefixes.
"""

from typing import Any, Dict, List, Optional

from eufy_bridge.events.schema import (
    DOORBELLS,
    INDOOR_CAMERAS,
    NO_THUMBNAIL,
    STATE_PAYLOADS,
    DeviceRecord,
    DiscoveryConfig,
    EventKind,
)

DEFAULT_PREFIX = "eufy"
DEFAULT_DISCOVERY_PREFIX = "homeassistant"

# Seconds before Home Assistant flips a binary sensor back to "off"
OFF_DELAY_SECONDS = 5

THUMBNAIL = "thumbnail"


def base_topic(serial: str, kind: EventKind, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Generate the topic root for a device's event kind.

    Args:
        serial: Device serial number
        kind: Event family
        prefix: Topic prefix (default: "eufy")

    Returns:
        MQTT topic string (e.g., "eufy/T8210P0001/motion")

    Examples:
        >>> base_topic("T8210P0001", EventKind.MOTION)
        'eufy/T8210P0001/motion'
        >>> base_topic("T8210P0001", EventKind.DOORBELL, prefix="home/eufy")
        'home/eufy/T8210P0001/doorbell'
    """
    return f"{prefix}/{serial}/{kind.value}"


def motion_detected_base_topic(serial: str, prefix: str = DEFAULT_PREFIX) -> str:
    return base_topic(serial, EventKind.MOTION, prefix)


def doorbell_pressed_base_topic(serial: str, prefix: str = DEFAULT_PREFIX) -> str:
    return base_topic(serial, EventKind.DOORBELL, prefix)


def crying_detected_base_topic(serial: str, prefix: str = DEFAULT_PREFIX) -> str:
    return base_topic(serial, EventKind.CRYING, prefix)


def state_topic(serial: str, kind: EventKind, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{base_topic(serial, kind, prefix)}/state"


def attributes_topic(serial: str, kind: EventKind, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{base_topic(serial, kind, prefix)}/attributes"


def thumbnail_topic(serial: str, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Generate the topic carrying a device's latest snapshot (raw image bytes).

    Examples:
        >>> thumbnail_topic("T8114P0042")
        'eufy/T8114P0042/thumbnail'
    """
    return f"{prefix}/{serial}/{THUMBNAIL}"


def status_topic(discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX) -> str:
    """Home Assistant birth/last-will topic ("online" / "offline")"""
    return f"{discovery_prefix}/status"


def discovery_topic(
    component: str,
    serial: str,
    object_id: str,
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX,
) -> str:
    """
    Generate a discovery config topic.

    Follows <discovery_prefix>/<component>/<node_id>/<object_id>/config.

    Examples:
        >>> discovery_topic("binary_sensor", "T8114P0042", "motion")
        'homeassistant/binary_sensor/eufy_T8114P0042/motion/config'
    """
    return f"{discovery_prefix}/{component}/eufy_{serial}/{object_id}/config"


def device_kinds(model: Optional[str]) -> List[EventKind]:
    """Event families a device model can emit"""
    kinds = [EventKind.MOTION]
    if model in DOORBELLS:
        kinds.append(EventKind.DOORBELL)
    if model in INDOOR_CAMERAS:
        kinds.append(EventKind.CRYING)
    return kinds


def _device_block(device: DeviceRecord) -> Dict[str, Any]:
    block: Dict[str, Any] = {
        "identifiers": [f"eufy_{device.serial}"],
        "name": device.name or device.serial,
        "manufacturer": "Eufy",
    }
    if device.model:
        block["model"] = device.model
    return block


_SENSOR_LABELS = {
    EventKind.MOTION: ("motion", "Motion detected"),
    EventKind.DOORBELL: ("occupancy", "Doorbell pressed"),
    EventKind.CRYING: ("sound", "Crying detected"),
}


def binary_sensor_config(
    device: DeviceRecord,
    kind: EventKind,
    prefix: str = DEFAULT_PREFIX,
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX,
) -> DiscoveryConfig:
    device_class, label = _SENSOR_LABELS[kind]
    return DiscoveryConfig(
        topic=discovery_topic("binary_sensor", device.serial, kind.value, discovery_prefix),
        message={
            "name": f"{device.name or device.serial} - {label}",
            "unique_id": f"eufy_{device.serial}_{kind.value}",
            "device_class": device_class,
            "state_topic": state_topic(device.serial, kind, prefix),
            "json_attributes_topic": attributes_topic(device.serial, kind, prefix),
            "payload_on": STATE_PAYLOADS[kind],
            "off_delay": OFF_DELAY_SECONDS,
            "device": _device_block(device),
        },
    )


def thumbnail_config(
    device: DeviceRecord,
    prefix: str = DEFAULT_PREFIX,
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX,
) -> DiscoveryConfig:
    return DiscoveryConfig(
        topic=discovery_topic("camera", device.serial, THUMBNAIL, discovery_prefix),
        message={
            "name": f"{device.name or device.serial} - Last event",
            "unique_id": f"eufy_{device.serial}_{THUMBNAIL}",
            "topic": thumbnail_topic(device.serial, prefix),
            "device": _device_block(device),
        },
    )


def discovery_configs(
    device: DeviceRecord,
    prefix: str = DEFAULT_PREFIX,
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX,
) -> List[DiscoveryConfig]:
    """
    Build every discovery announcement for a device.

    Every device gets a motion binary sensor; doorbells add a "pressed"
    sensor, indoor cameras a "crying" sensor, and anything that takes
    snapshots a camera entity fed by the thumbnail topic.

    Args:
        device: Registry record
        prefix: State topic prefix
        discovery_prefix: Home Assistant discovery prefix

    Returns:
        List of DiscoveryConfig, stable for the same input
    """
    configs = [
        binary_sensor_config(device, kind, prefix, discovery_prefix)
        for kind in device_kinds(device.model)
    ]
    if device.model not in NO_THUMBNAIL:
        configs.append(thumbnail_config(device, prefix, discovery_prefix))
    return configs
