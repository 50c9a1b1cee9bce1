"""Provider and consumer of the mixed sample: subscriptions, set and invoke."""

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
from twinsamples.vehicle import Vehicle

logger = logging.getLogger(__name__)

IS_AIR_CONDITIONING_ACTIVE_ID = "dtmi:sdv:HVAC:IsAirConditioningActive;1"
IS_AIR_CONDITIONING_ACTIVE_NAME = "IsAirConditioningActive"
SHOW_NOTIFICATION_ID = "dtmi:sdv:HMI:ShowNotification;1"


class ConsumerClient(Protocol):
    """The part of a consumer that receives invoke responses."""

    async def respond(self, request: RespondRequest) -> Any: ...


ConsumerConnector = Callable[[str], Awaitable[ConsumerClient]]


class MixedProvider:
    """Provider that keeps subscriptions, sets A/C state and runs commands."""

    def __init__(
        self,
        vehicle: Optional[Vehicle] = None,
        connect_consumer: Optional[ConsumerConnector] = None,
    ) -> None:
        self.subscription_map: dict[str, set[str]] = {}
        self.vehicle = vehicle if vehicle is not None else Vehicle()
        self.lock = threading.Lock()
        self._connect_consumer = connect_consumer
        self._tasks: set[asyncio.Task] = set()

    def set_is_air_conditioning_active(self, value: bool) -> None:
        """Switch the vehicle's air conditioning on or off."""
        with self.lock:
            self.vehicle.is_air_conditioning_active = value

    @staticmethod
    def _show_notification(payload: str) -> None:
        logger.info("Notification: '%s'", payload)

    async def subscribe(self, request: SubscribeRequest) -> None:
        """Record the consumer URI as a subscriber of the entity."""
        logger.info(
            "Received a subscribe request for id %s from consumer URI %s",
            request.entity_id,
            request.consumer_uri,
        )
        with self.lock:
            self.subscription_map.setdefault(request.entity_id, set()).add(
                request.consumer_uri
            )
        logger.debug("Completed the subscribe request.")

    async def unsubscribe(self, request: UnsubscribeRequest) -> None:
        logger.warning("Got an unsubscribe request: %r", request)
        raise StatusError.unimplemented("unsubscribe has not been implemented")

    async def get(self, request: GetRequest) -> None:
        logger.warning("Got a get request: %r", request)
        raise StatusError.unimplemented("get has not been implemented")

    async def set(self, request: SetRequest) -> None:
        """Apply a JSON property value; only the A/C state is recognised."""
        try:
            property_json = json.loads(request.value)
        except json.JSONDecodeError as err:
            raise StatusError.invalid_argument(str(err)) from err
        if not isinstance(property_json, dict) or (
            IS_AIR_CONDITIONING_ACTIVE_NAME not in property_json
        ):
            raise StatusError.invalid_argument(
                f"missing field {IS_AIR_CONDITIONING_ACTIVE_NAME}"
            )
        is_active = property_json[IS_AIR_CONDITIONING_ACTIVE_NAME]
        if not isinstance(is_active, bool):
            raise StatusError.invalid_argument(
                f"{IS_AIR_CONDITIONING_ACTIVE_NAME} must be a boolean"
            )

        logger.info(
            "Received a set request for entity id %s with value '%s'",
            request.entity_id,
            request.value,
        )
        if request.entity_id == IS_AIR_CONDITIONING_ACTIVE_ID:
            self.set_is_air_conditioning_active(is_active)
        else:
            logger.warning(
                "Error: The entity id %s is not recognized.", request.entity_id
            )
        logger.debug("Completed the set request.")

    async def invoke(self, request: InvokeRequest) -> asyncio.Task:
        """Start the command in the background and return the task that answers it."""
        logger.debug("Got an invoke request: %r", request)
        logger.info(
            "Received an invoke request from for entity id %s with payload '%s' "
            "from consumer URI %s",
            request.entity_id,
            request.payload,
            request.consumer_uri,
        )
        task = asyncio.get_running_loop().create_task(self._run_invoke(request))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        logger.debug("Completed the invoke request.")
        return task

    async def stream(self, request: StreamRequest) -> None:
        logger.warning("Got a stream request: %r", request)
        raise StatusError.unimplemented("stream has not been implemented")

    async def _run_invoke(self, request: InvokeRequest) -> Any:
        entity_id = request.entity_id
        if entity_id == SHOW_NOTIFICATION_ID:
            self._show_notification(request.payload)
            response_payload = f"Successfully invoked {entity_id}"
        else:
            response_payload = f"Error: The entity id {entity_id} is not recognized."

        logger.info(
            "Sending an invoke response for entity id %s to consumer URI %s",
            entity_id,
            request.consumer_uri,
        )
        if self._connect_consumer is None:
            raise StatusError.internal(
                f"No connection available to consumer {request.consumer_uri}"
            )
        try:
            client = await self._connect_consumer(request.consumer_uri)
        except Exception as err:
            raise StatusError.internal(repr(err)) from err

        return await client.respond(
            RespondRequest(
                entity_id=entity_id,
                response_id=request.response_id,
                payload=response_payload,
            )
        )

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            logger.warning("Invoke response failed: %s", err)


class MixedConsumer:
    """Consumer that logs and keeps the publications and responses it receives."""

    def __init__(self) -> None:
        self.published: list[PublishRequest] = []
        self.responses: list[RespondRequest] = []

    async def publish(self, request: PublishRequest) -> None:
        logger.info(
            "Received a publish request for entity id %s with the value %s",
            request.entity_id,
            request.value,
        )
        self.published.append(request)

    async def respond(self, request: RespondRequest) -> None:
        logger.info(
            "Received a respond request for entity id %s with the response id %s "
            "and the payload '%s'",
            request.entity_id,
            request.response_id,
            request.payload,
        )
        self.responses.append(request)