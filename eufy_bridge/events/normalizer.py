"""
Push Notification Normalizer
=============================

Extracts a NormalizedEvent from a raw vendor push notification.

The vendor has shipped at least three payload shapes for the same logical
event (generic, nested ``payload.payload`` and a JSON string under
``payload.doorbell``) without any version tag, so every field is resolved
through an ordered list of extraction rules: the first rule that yields a
value wins.
"""

import json
from typing import Any, Callable, Mapping, Optional, Sequence

from eufy_bridge.events.schema import EventAttributes, NormalizedEvent
from eufy_bridge.logging_utils import get_component_logger

logger = get_component_logger(__name__, "normalizer")

Rule = Callable[[Mapping[str, Any]], Any]

_MISSING = object()


def get_path(data: Any, path: str) -> Any:
    """
    Read a dotted path from nested mappings.

    Args:
        data: Root object (usually the raw notification)
        path: Dotted key path (e.g. "payload.doorbell.device_sn")

    Returns:
        The value, or None if any segment is missing or not a mapping

    Examples:
        >>> get_path({"payload": {"type": 3101}}, "payload.type")
        3101
        >>> get_path({"payload": {"doorbell": "{...}"}}, "payload.doorbell.device_sn") is None
        True
    """
    current = data
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return None
    return current


def path_rule(path: str) -> Rule:
    """Build an extraction rule reading a single dotted path"""

    def rule(notification: Mapping[str, Any]) -> Any:
        return get_path(notification, path)

    rule.__name__ = f"path:{path}"
    return rule


def first_match(rules: Sequence[Rule], notification: Mapping[str, Any]) -> Any:
    """Evaluate rules in order and return the first truthy value"""
    for rule in rules:
        value = rule(notification)
        if value:
            return value
    return None


def to_event_type(value: Any) -> int:
    """Coerce a vendor event code to int (0 when missing or not numeric)"""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def doorbell_event_type(notification: Mapping[str, Any]) -> int:
    """
    Resolve the event type from the string-encoded doorbell payload.

    Doorbells (T8200 family) send ``payload.doorbell`` as JSON text. On
    success the string is replaced in place by the parsed object so the
    serial and attribute rules can read through it.
    """
    doorbell = get_path(notification, "payload.doorbell")
    if not doorbell:
        return 0

    if isinstance(doorbell, (str, bytes)):
        try:
            parsed = json.loads(doorbell)
        except ValueError as e:
            logger.debug(f"Error parsing doorbell payload: {e}")
            return 0
        if not isinstance(parsed, dict):
            logger.debug(f"Doorbell payload is not an object: {parsed!r}")
            return 0
        notification["payload"]["doorbell"] = parsed
        doorbell = parsed

    if not isinstance(doorbell, Mapping):
        return 0
    return to_event_type(doorbell.get("event_type"))


TYPE_RULES: Sequence[Rule] = (
    lambda n: to_event_type(get_path(n, "payload.payload.event_type")),
    lambda n: to_event_type(get_path(n, "payload.type")),
    lambda n: to_event_type(get_path(n, "payload.event_type")),
    doorbell_event_type,
)

SERIAL_RULES: Sequence[Rule] = (
    path_rule("payload.device_sn"),
    path_rule("payload.payload.device_sn"),
    path_rule("payload.doorbell.device_sn"),
    path_rule("payload.station_sn"),
)

EVENT_TIME_RULES: Sequence[Rule] = (
    path_rule("payload.event_time"),
    path_rule("payload.doorbell.event_time"),
)

THUMBNAIL_RULES: Sequence[Rule] = (
    path_rule("payload.payload.pic_url"),
    path_rule("payload.doorbell.pic_url"),
)


def resolve_event_type(notification: Mapping[str, Any]) -> int:
    return first_match(TYPE_RULES, notification) or 0


def resolve_device_serial(notification: Mapping[str, Any]) -> Optional[str]:
    serial = first_match(SERIAL_RULES, notification)
    return str(serial) if serial else None


def resolve_attributes(notification: Mapping[str, Any]) -> EventAttributes:
    thumbnail = first_match(THUMBNAIL_RULES, notification)
    return EventAttributes(
        event_time=first_match(EVENT_TIME_RULES, notification),
        thumbnail=str(thumbnail) if thumbnail else None,
    )


def normalize(notification: Mapping[str, Any]) -> NormalizedEvent:
    """
    Normalize a raw push notification.

    The type is resolved first because it may unpack the doorbell payload
    that the serial and attribute rules depend on.

    Args:
        notification: Raw notification as delivered by the push service

    Returns:
        NormalizedEvent (type 0 and/or device_serial None when unresolved)
    """
    event_type = resolve_event_type(notification)
    return NormalizedEvent(
        type=event_type,
        device_serial=resolve_device_serial(notification),
        attributes=resolve_attributes(notification),
    )
