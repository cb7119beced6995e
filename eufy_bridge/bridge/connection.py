"""
MQTT Bus Connection
===================

Owns the aiomqtt session: connects with credentials and keep-alive,
subscribes to the Home Assistant status topic, feeds incoming messages to the
publisher and reconnects after broker errors.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiomqtt

from eufy_bridge.bridge.config import BridgeConfig
from eufy_bridge.bridge.publisher import MqttPublisher
from eufy_bridge.logging_utils import get_component_logger

logger = get_component_logger(__name__, "connection")


def create_client(config: BridgeConfig) -> aiomqtt.Client:
    """Build an aiomqtt client from the bridge config (not yet connected)"""
    return aiomqtt.Client(
        hostname=config.mqtt_host,
        port=config.mqtt_port,
        username=config.mqtt_username,
        password=config.mqtt_password,
        identifier=config.client_id,
        keepalive=config.mqtt_keepalive,
    )


class BusConnection:
    """
    Connection lifecycle around a single, reusable aiomqtt client.

    The same client object is handed to the MqttPublisher once and re-entered
    on every reconnect, so the publisher never holds a stale handle.

    Args:
        config: BridgeConfig instance
        client: Pre-built client (default: create_client(config))

    Example:
        >>> connection = BusConnection(config)
        >>> publisher = MqttPublisher(connection.client, registry, config, http)
        >>> await connection.run(publisher)  # until cancelled
    """

    def __init__(self, config: BridgeConfig, client: Optional[aiomqtt.Client] = None):
        self.config = config
        self.client = client or create_client(config)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[aiomqtt.Client]:
        """Connect once; disconnect when the block exits"""
        logger.info(
            f"Connecting to MQTT broker {self.config.mqtt_host}:{self.config.mqtt_port}",
            extra={"event": "mqtt_connecting"},
        )
        async with self.client:
            logger.info("MQTT connected", extra={"event": "mqtt_connected"})
            try:
                yield self.client
            finally:
                logger.info("MQTT connection closed", extra={"event": "mqtt_closed"})

    async def run(self, publisher: MqttPublisher) -> None:
        """
        Serve until cancelled.

        Broker errors (connection refused, connection lost) are logged and
        followed by a reconnect after config.reconnect_interval seconds.
        """
        logger.info(
            "Starting MQTT bridge",
            extra={"event": "bridge_starting", "config": self.config.to_status_dict()},
        )
        while True:
            try:
                async with self.session() as client:
                    await publisher.subscribe_status()
                    async for message in client.messages:
                        await self._dispatch(publisher, message)
            except aiomqtt.MqttError as e:
                logger.error(f"MQTT error: {e}", extra={"event": "mqtt_error"})
                logger.info(
                    f"MQTT reconnect in {self.config.reconnect_interval}s",
                    extra={"event": "mqtt_reconnect"},
                )
                await asyncio.sleep(self.config.reconnect_interval)

    @staticmethod
    async def _dispatch(publisher: MqttPublisher, message: aiomqtt.Message) -> None:
        try:
            await publisher.handle_message(message.topic.value, message.payload)
        except aiomqtt.MqttError:
            raise
        except Exception as e:
            logger.error(
                f"Error handling message on {message.topic.value}: {e}",
                extra={"event": "message_failed"},
            )
