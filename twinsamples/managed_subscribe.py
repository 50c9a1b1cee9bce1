"""Provider of the managed subscribe sample: publishes to topics on request."""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

import paho.mqtt.client as mqtt

from twinsamples.messages import (
    CallbackPayload,
    StatusError,
    TopicManagementRequest,
)
from twinsamples.signals import property_json, temperature_values

logger = logging.getLogger(__name__)

MQTT_CLIENT_ID = "managed-subscribe-publisher"
DEFAULT_MQTT_PORT = 1883
KEEP_ALIVE_SECONDS = 30
PUBLISH_TIMEOUT_SECONDS = 30.0

AMBIENT_AIR_TEMPERATURE_ID = "dtmi:sdv:HVAC:AmbientAirTemperature;1"
AMBIENT_AIR_TEMPERATURE_NAME = "AmbientAirTemperature"
FREQUENCY_MS_CONSTRAINT = "frequency_ms"

Publisher = Callable[[str, str, str], None]


class ProviderAction(str, enum.Enum):
    """Actions that the pub/sub service asks the provider to carry out."""

    PUBLISH = "PUBLISH"
    STOP_PUBLISH = "STOP_PUBLISH"

    def __str__(self) -> str:
        return self.value


@dataclass
class TopicInfo:
    """A topic being published to, and the signal that stops it."""

    topic: str
    stop_event: asyncio.Event = field(default_factory=asyncio.Event)
    task: Optional[asyncio.Task] = None


class TemperatureFeed:
    """The latest ambient air temperature, bouncing between 65 and 85 degrees."""

    def __init__(self, start: int = 75) -> None:
        self._values = temperature_values(start)
        self.value: int = next(self._values)

    def advance(self) -> int:
        """Move to the next temperature and return it."""
        self.value = next(self._values)
        logger.debug(
            "Recording new value for %s of %d", AMBIENT_AIR_TEMPERATURE_ID, self.value
        )
        return self.value

    async def run(self, interval_ms: int) -> None:
        """Advance the feed once every interval, forever."""
        logger.debug("Starting the Provider's ambient air temperature data stream.")
        while True:
            await asyncio.sleep(interval_ms / 1000)
            self.advance()


def _new_client(client_id: str) -> mqtt.Client:
    if hasattr(mqtt, "CallbackAPIVersion"):
        return mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2, client_id=client_id, clean_session=True
        )
    return mqtt.Client(client_id=client_id, clean_session=True)


def publish_message(broker_uri: str, topic: str, content: str) -> None:
    """Publish one message with QoS 1 to the MQTT broker at broker_uri."""
    parts = urlsplit(broker_uri)
    if not parts.hostname:
        raise ValueError(f"Invalid broker URI '{broker_uri}'")
    port = parts.port or DEFAULT_MQTT_PORT

    client = _new_client(MQTT_CLIENT_ID)
    try:
        client.connect(parts.hostname, port, keepalive=KEEP_ALIVE_SECONDS)
    except OSError as err:
        raise ConnectionError(f"Failed to publish message due to '{err!r}'") from err

    client.loop_start()
    try:
        info = client.publish(topic, content, qos=1)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise ConnectionError(
                f"Failed to publish message due to '{mqtt.error_string(info.rc)}'"
            )
        info.wait_for_publish(timeout=PUBLISH_TIMEOUT_SECONDS)
        if not info.is_published():
            raise ConnectionError("Failed to publish message due to 'timeout'")
    finally:
        rc = client.disconnect()
        if rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning(
                "Failed to disconnect from topic '%s' on broker %s due to %s",
                topic,
                broker_uri,
                mqtt.error_string(rc),
            )
        client.loop_stop()


class ManagedSubscribeProvider:
    """Starts and stops publishing to topics as the pub/sub service asks."""

    def __init__(
        self,
        data_stream: TemperatureFeed,
        min_interval_ms: int,
        publisher: Publisher = publish_message,
    ) -> None:
        self.data_stream = data_stream
        self.min_interval_ms = min_interval_ms
        self._publisher = publisher
        self._lock = threading.Lock()
        self._entity_map: dict[str, list[TopicInfo]] = {AMBIENT_AIR_TEMPERATURE_ID: []}

    def topics(self, entity_id: str) -> list[str]:
        """Topics currently published for the entity."""
        with self._lock:
            return [info.topic for info in self._entity_map[entity_id]]

    def _frequency_ms(self, payload: CallbackPayload) -> int:
        frequency_ms = self.min_interval_ms
        for constraint in payload.constraints:
            if constraint.type == FREQUENCY_MS_CONSTRAINT:
                frequency_ms = int(constraint.value)
                if frequency_ms < 0:
                    raise ValueError(f"Invalid frequency '{constraint.value}'")
        return frequency_ms

    def handle_publish_action(self, payload: CallbackPayload) -> asyncio.Task:
        """Start publishing to the payload's topic; return the publishing task."""
        if payload.subscription_info is None:
            raise ValueError("The payload carries no subscription information")
        frequency_ms = self._frequency_ms(payload)
        broker_uri = payload.subscription_info.uri

        topic_info = TopicInfo(topic=payload.topic)
        with self._lock:
            if payload.entity_id not in self._entity_map:
                raise ValueError(f"Unknown entity id {payload.entity_id}")
            self._entity_map[payload.entity_id].append(topic_info)

        task = asyncio.get_running_loop().create_task(
            self._publish_loop(
                payload.topic, broker_uri, frequency_ms, topic_info.stop_event
            )
        )
        topic_info.task = task
        return task

    def handle_stop_publish_action(self, payload: CallbackPayload) -> None:
        """Stop publishing to the payload's topic, if it is being published."""
        with self._lock:
            if payload.entity_id not in self._entity_map:
                raise ValueError(f"Unknown entity id {payload.entity_id}")
            topics = self._entity_map[payload.entity_id]
            index = next(
                (i for i, info in enumerate(topics) if info.topic == payload.topic),
                None,
            )
            if index is None:
                logger.warning("No topic found matching %s", payload.topic)
                return
            topic_info = topics.pop(index)
        topic_info.stop_event.set()

    async def topic_management_cb(self, request: TopicManagementRequest) -> None:
        """Carry out the action that the pub/sub service requested."""
        if request.payload is None:
            raise StatusError.invalid_argument("The request carries no payload")
        try:
            action = ProviderAction(request.action)
        except ValueError as err:
            raise StatusError.invalid_argument(
                f"Unknown action '{request.action}'"
            ) from err

        if action is ProviderAction.PUBLISH:
            self.handle_publish_action(request.payload)
        else:
            self.handle_stop_publish_action(request.payload)

    async def _publish_loop(
        self,
        topic: str,
        broker_uri: str,
        frequency_ms: int,
        stop_event: asyncio.Event,
    ) -> None:
        while not stop_event.is_set():
            data = self.data_stream.value
            content = property_json(
                AMBIENT_AIR_TEMPERATURE_NAME, data, AMBIENT_AIR_TEMPERATURE_ID
            )
            logger.info(
                "Publish to %s for %s with value %s",
                topic,
                AMBIENT_AIR_TEMPERATURE_NAME,
                data,
            )
            try:
                await asyncio.to_thread(self._publisher, broker_uri, topic, content)
            except Exception as err:
                logger.warning("Publish failed due to '%r'", err)
                return
            logger.debug("Completed publish to %s.", topic)

            try:
                await asyncio.wait_for(stop_event.wait(), frequency_ms / 1000)
            except asyncio.TimeoutError:
                continue
        logger.info("Shutdown thread for %s.", topic)