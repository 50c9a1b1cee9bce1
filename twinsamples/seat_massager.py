"""Provider and consumer of the seat massager sample: get and set of airbag levels."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Any, Optional, Protocol

from twinsamples.messages import (
    GetRequest,
    InvokeRequest,
    PublishRequest,
    RespondRequest,
    SetRequest,
    StatusError,
    StreamRequest,
    SubscribeRequest,
    UnsubscribeRequest,
)
from twinsamples.signals import property_json

logger = logging.getLogger(__name__)

MASSAGE_AIRBAGS_ID = "dtmi:sdv:AirbagSeatMassager:MassageAirbags;1"
MASSAGE_AIRBAGS_NAME = "MassageAirbags"


class PublishClient(Protocol):
    """The part of a consumer that receives published values."""

    async def publish(self, request: PublishRequest) -> Any: ...


ConsumerConnector = Callable[[str], Awaitable[PublishClient]]


def _parse_massage_airbags(value: str) -> list[int]:
    """Extract the airbag inflation levels from a property's JSON form."""
    try:
        document = json.loads(value)
    except json.JSONDecodeError as err:
        raise ValueError(str(err)) from err
    if not isinstance(document, dict) or MASSAGE_AIRBAGS_NAME not in document:
        raise ValueError(f"missing field {MASSAGE_AIRBAGS_NAME}")
    airbags = document[MASSAGE_AIRBAGS_NAME]
    if not isinstance(airbags, list) or not all(
        isinstance(level, int) and not isinstance(level, bool) for level in airbags
    ):
        raise ValueError(f"{MASSAGE_AIRBAGS_NAME} must be a list of integers")
    return list(airbags)


class SeatMassagerProvider:
    """Provider that holds the massage airbag levels and answers get and set."""

    def __init__(self, connect_consumer: Optional[ConsumerConnector] = None) -> None:
        self.massage_airbags: list[int] = []
        self.lock = threading.Lock()
        self._connect_consumer = connect_consumer
        self._tasks: set[asyncio.Task] = set()

    def apply_massage_airbags(self, value: str) -> None:
        """Set the airbag levels from the property's JSON form."""
        airbags = _parse_massage_airbags(value)
        logger.info("Setting message airbags to: %s", airbags)
        with self.lock:
            self.massage_airbags = airbags

    def massage_airbags_json(self) -> str:
        """The airbag levels in the property's JSON form."""
        with self.lock:
            airbags = list(self.massage_airbags)
        return property_json(MASSAGE_AIRBAGS_NAME, airbags, MASSAGE_AIRBAGS_ID)

    async def subscribe(self, request: SubscribeRequest) -> None:
        logger.warning("Got subscribe request: %r", request)
        raise StatusError.unimplemented("subscribe has not been implemented")

    async def unsubscribe(self, request: UnsubscribeRequest) -> None:
        logger.warning("Got an unsubscribe request: %r", request)
        raise StatusError.unimplemented("unsubscribe has not been implemented")

    async def get(self, request: GetRequest) -> asyncio.Task:
        """Publish the current value to the consumer in the background."""
        logger.info("Received a get request for entity id %s", request.entity_id)
        task = asyncio.get_running_loop().create_task(self._run_get(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Completed the get request.")
        return task

    async def set(self, request: SetRequest) -> None:
        """Apply a new value; failures are logged, not returned to the caller."""
        logger.info("Received a set request for entity id %s", request.entity_id)
        if request.entity_id == MASSAGE_AIRBAGS_ID:
            try:
                self.apply_massage_airbags(request.value)
            except ValueError as err:
                logger.warning("Failed to set %s due to: %s", request.entity_id, err)
        else:
            logger.warning(
                "Error: The entity id %s is not recognized.", request.entity_id
            )
        logger.debug("Completed the set request.")

    async def invoke(self, request: InvokeRequest) -> None:
        logger.warning("Got an invoke request: %r", request)
        raise StatusError.unimplemented("invoke has not been implemented")

    async def stream(self, request: StreamRequest) -> None:
        logger.warning("Got a stream request: %r", request)
        raise StatusError.unimplemented("stream has not been implemented")

    async def _run_get(self, request: GetRequest) -> bool:
        """Send the value to the consumer; return whether it was published."""
        entity_id = request.entity_id
        if entity_id != MASSAGE_AIRBAGS_ID:
            logger.warning("The entity id %s is not recognized.", entity_id)
            return False
        value = self.massage_airbags_json()
        if self._connect_consumer is None:
            logger.warning(
                "Unable to connect due to no connection to %s", request.consumer_uri
            )
            return False
        try:
            client = await self._connect_consumer(request.consumer_uri)
        except Exception as err:
            logger.warning("Unable to connect due to %s", err)
            return False
        try:
            await client.publish(PublishRequest(entity_id=entity_id, value=value))
        except Exception as err:
            logger.warning("Publish failed: %r", err)
            return False
        return True


class SeatMassagerConsumer:
    """Consumer that logs and keeps the airbag levels published to it."""

    def __init__(self) -> None:
        self.received: list[tuple[str, list[int]]] = []

    async def publish(self, request: PublishRequest) -> None:
        try:
            airbags = _parse_massage_airbags(request.value)
        except ValueError as err:
            raise StatusError.invalid_argument(str(err)) from err
        logger.info(
            "Received a publish for entity id %s with the value: %s",
            request.entity_id,
            airbags,
        )
        self.received.append((request.entity_id, airbags))

    async def respond(self, request: RespondRequest) -> None:
        logger.warning("Got a respond request: %r", request)
        raise StatusError.unimplemented("respond has not been implemented")