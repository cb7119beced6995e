"""
Shared fakes for unit tests
============================

FakeMessageBroker implements the MessageBroker protocol
(eufy_bridge/interfaces.py) so publishing can be asserted without a broker.
"""

from typing import List, Optional, Set, Tuple, Union

import aiomqtt
import httpx
import pytest

from eufy_bridge.bridge import BridgeConfig, DeviceRegistry, MqttPublisher


class FakeMessageBroker:
    """
    Fake asyncio MQTT client.

    Captures published messages; can be told to fail every publish, or only
    publishes to topics containing one of fail_topics.
    """

    def __init__(
        self,
        fail_publish: bool = False,
        fail_topics: Optional[Set[str]] = None,
        fail_subscribe: bool = False,
    ):
        self.published: List[Tuple[str, Union[str, bytes, None], int, bool]] = []
        self.subscriptions: List[str] = []
        self.fail_publish = fail_publish
        self.fail_topics = fail_topics or set()
        self.fail_subscribe = fail_subscribe

    async def publish(self, topic, payload=None, qos=0, retain=False):
        if self.fail_publish or any(part in topic for part in self.fail_topics):
            raise aiomqtt.MqttError(f"publish to {topic} failed")
        self.published.append((topic, payload, qos, retain))

    async def subscribe(self, topic, qos=0):
        if self.fail_subscribe:
            raise aiomqtt.MqttError("subscribe failed")
        self.subscriptions.append(topic)

    def topics(self) -> List[str]:
        return [topic for topic, _, _, _ in self.published]

    def payload_for(self, topic: str):
        for published_topic, payload, _, _ in self.published:
            if published_topic == topic:
                return payload
        raise KeyError(topic)


@pytest.fixture
def broker() -> FakeMessageBroker:
    return FakeMessageBroker()


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(mqtt_host="broker.test")


@pytest.fixture
def registry() -> DeviceRegistry:
    return DeviceRegistry()


@pytest.fixture
def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient()


@pytest.fixture
def publisher(broker, registry, config, http_client) -> MqttPublisher:
    return MqttPublisher(broker, registry, config, http_client)


@pytest.fixture
def broker_factory():
    return FakeMessageBroker
