"""
Event Dispatcher
================

Routes normalized push notifications to the matching publish routine.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from eufy_bridge.events.normalizer import normalize
from eufy_bridge.events.schema import EventAttributes, EventKind, NormalizedEvent, NotificationType
from eufy_bridge.interfaces import PushNotificationSource
from eufy_bridge.logging_utils import generate_trace_id, get_component_logger, trace_context

logger = get_component_logger(__name__, "dispatcher")

EVENT_KINDS: Dict[int, EventKind] = {
    NotificationType.DOORBELL_PRESSED: EventKind.DOORBELL,
    NotificationType.DOORBELL_SOMEONE_SPOTTED: EventKind.MOTION,
    NotificationType.CAM_SOMEONE_SPOTTED: EventKind.MOTION,
    NotificationType.CAM_2_SOMEONE_SPOTTED: EventKind.MOTION,
    NotificationType.CAM_2C_SOMEONE_SPOTTED: EventKind.MOTION,
    NotificationType.FLOODLIGHT_MOTION_DETECTED: EventKind.MOTION,
    NotificationType.MOTION_SENSOR_TRIGGERED: EventKind.MOTION,
    NotificationType.CRYING_DETECTED: EventKind.CRYING,
}


def classify(event_type: int) -> EventKind:
    """Map a vendor event code to its event family"""
    return EVENT_KINDS.get(event_type, EventKind.UNRECOGNIZED)


@dataclass
class EventOutcome:
    """
    Result of handling one routed notification.

    state_published / thumbnail_published are None when the step was not
    attempted (no serial, or no thumbnail URL).
    """

    kind: EventKind
    device_serial: Optional[str] = None
    state_published: Optional[bool] = None
    thumbnail_published: Optional[bool] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.device_serial is not None


class EventDispatcher:
    """
    Turns raw push notifications into MQTT publishes.

    Every failure is logged and reported in the returned EventOutcome; the
    caller never sees an exception, so one broken notification cannot stop
    the next one.

    Args:
        publisher: MqttPublisher (or any object with the same send methods)

    Example:
        >>> dispatcher = EventDispatcher(publisher)
        >>> outcome = await dispatcher.process_push_notification(notification)
        >>> outcome.state_published
        True
    """

    def __init__(self, publisher: Any):
        self.publisher = publisher
        self._senders: Dict[EventKind, Callable[[str, EventAttributes], Awaitable[None]]] = {
            EventKind.DOORBELL: publisher.send_doorbell_pressed_event,
            EventKind.MOTION: publisher.send_motion_detected_event,
            EventKind.CRYING: publisher.send_crying_detected_event,
        }

    async def process_push_notification(
        self, notification: Mapping[str, Any]
    ) -> Optional[EventOutcome]:
        """
        Handle one push notification.

        Args:
            notification: Raw vendor notification (may be mutated: a
                string-encoded doorbell payload is replaced by its parsed object)

        Returns:
            EventOutcome, or None if the event type is not one we publish
        """
        with trace_context(generate_trace_id("push")):
            event = normalize(notification)
            event.kind = classify(event.type)
            logger.debug(f"Got Push Notification of type {event.type}")

            if event.kind is EventKind.UNRECOGNIZED:
                return None

            return await self._handle(event, notification)

    async def consume(self, source: PushNotificationSource) -> int:
        """
        Process notifications from an async source until it is exhausted.

        Returns:
            Number of notifications processed
        """
        count = 0
        async for notification in source:
            await self.process_push_notification(notification)
            count += 1
        return count

    async def _handle(self, event: NormalizedEvent, notification: Mapping[str, Any]) -> EventOutcome:
        kind = event.kind
        outcome = EventOutcome(kind=kind, device_serial=event.device_serial)

        if not event.device_serial:
            logger.warning(
                f"Got {kind.value} event with unknown device_sn: {notification}",
                extra={"event": "unknown_device"},
            )
            return outcome

        serial = event.device_serial
        attributes = event.attributes

        try:
            await self._senders[kind](serial, attributes)
            outcome.state_published = True
        except Exception as e:
            outcome.state_published = False
            outcome.errors.append(f"state: {e}")
            logger.error(
                f"Failure in {kind.value} event for {serial}: {e}",
                extra={"event": "state_publish_failed", "device_sn": serial},
            )

        if attributes.thumbnail:
            try:
                await self.publisher.upload_thumbnail(serial, attributes.thumbnail)
                outcome.thumbnail_published = True
            except Exception as e:
                outcome.thumbnail_published = False
                outcome.errors.append(f"thumbnail: {e}")
                logger.error(
                    f"Failure uploading thumbnail for {serial}: {e}",
                    extra={"event": "thumbnail_failed", "device_sn": serial},
                )

        if outcome.ok:
            logger.info(
                f"Published {kind.value} event for {serial}",
                extra={"event": f"{kind.value}_published", "device_sn": serial},
            )
        return outcome
