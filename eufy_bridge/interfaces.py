"""
Interfaces for Dependency Injection
====================================

Protocols (interfaces) for decoupling the bridge from concrete implementations.

This allows:
- Testing with fake implementations (no MQTT broker, no vendor cloud needed)
- Swapping implementations (e.g., a database-backed device registry)
- Clear contracts for the external collaborators
"""

from typing import Any, List, Protocol, Sequence, Union

from eufy_bridge.events.schema import DeviceRecord


class MessageBroker(Protocol):
    """
    Protocol for an asyncio MQTT-like message broker.

    Concrete implementation: aiomqtt.Client
    Test implementation: FakeMessageBroker (see tests/unit/conftest.py)
    """

    async def publish(
        self,
        topic: str,
        payload: Union[str, bytes, None] = None,
        qos: int = 0,
        retain: bool = False,
    ) -> Any:
        """
        Publish message to topic.

        Args:
            topic: MQTT topic string
            payload: Message payload (JSON string or raw image bytes)
            qos: Quality of Service (0, 1, or 2)
            retain: Retain message on broker
        """
        ...

    async def subscribe(self, topic: str, qos: int = 0) -> Any:
        """
        Subscribe to topic.

        Args:
            topic: MQTT topic string (supports wildcards: +, #)
            qos: Quality of Service (0, 1, or 2)
        """
        ...


class DeviceStore(Protocol):
    """
    Protocol for the persistent device registry.

    Concrete implementation: DeviceRegistry (eufy_bridge/bridge/registry.py)
    """

    async def create_or_update_device(self, record: DeviceRecord) -> DeviceRecord:
        """Insert or replace the record keyed by its serial."""
        ...

    async def get_devices(self) -> List[DeviceRecord]:
        """Return every known device, in insertion order."""
        ...


class CloudClient(Protocol):
    """
    Protocol for the vendor HTTP/cloud client.

    Authentication and session handling live entirely behind this interface.
    Devices are returned as the vendor's raw mappings (``device_sn``,
    ``device_name``, ``device_model``, ...).
    """

    async def list_devices(self) -> Sequence[dict]:
        ...

    async def register_push_token(self, token: str) -> Any:
        ...

    async def push_token_check(self) -> Any:
        ...


class PushNotificationSource(Protocol):
    """
    Protocol for an inbound push-notification stream.

    Yields raw vendor notifications, one per event.
    """

    def __aiter__(self) -> "PushNotificationSource":
        ...

    async def __anext__(self) -> dict:
        ...

