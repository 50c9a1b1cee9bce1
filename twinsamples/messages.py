"""Message types exchanged between digital twin providers, consumers and services."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional


class StatusCode(enum.IntEnum):
    """Status codes carried by a failed call."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class StatusError(Exception):
    """A call that failed with a status code and a message."""

    def __init__(self, code: StatusCode, message: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.name}, {self.message!r})"

    @classmethod
    def unimplemented(cls, message: str) -> "StatusError":
        return cls(StatusCode.UNIMPLEMENTED, message)

    @classmethod
    def invalid_argument(cls, message: str) -> "StatusError":
        return cls(StatusCode.INVALID_ARGUMENT, message)

    @classmethod
    def internal(cls, message: str) -> "StatusError":
        return cls(StatusCode.INTERNAL, message)


# In-vehicle digital twin registration.


@dataclass
class EndpointInfo:
    protocol: str = ""
    operations: list[str] = field(default_factory=list)
    uri: str = ""
    context: str = ""


@dataclass
class EntityAccessInfo:
    name: str = ""
    id: str = ""
    description: str = ""
    endpoint_info_list: list[EndpointInfo] = field(default_factory=list)


@dataclass
class RegisterRequest:
    entity_access_info_list: list[EntityAccessInfo] = field(default_factory=list)


# Managed subscribe.


@dataclass
class Constraint:
    type: str = ""
    value: str = ""


@dataclass
class SubscriptionInfo:
    uri: str = ""


@dataclass
class CallbackPayload:
    entity_id: str = ""
    topic: str = ""
    constraints: list[Constraint] = field(default_factory=list)
    subscription_info: Optional[SubscriptionInfo] = None


@dataclass
class TopicManagementRequest:
    action: str = ""
    payload: Optional[CallbackPayload] = None


@dataclass
class SubscriptionInfoRequest:
    entity_id: str = ""
    constraints: list[Constraint] = field(default_factory=list)


@dataclass
class SubscriptionInfoResponse:
    uri: str = ""
    context: str = ""


# Digital twin consumer.


@dataclass
class PublishRequest:
    entity_id: str = ""
    value: str = ""


@dataclass
class RespondRequest:
    entity_id: str = ""
    response_id: str = ""
    payload: str = ""


# Digital twin provider.


@dataclass
class SubscribeRequest:
    entity_id: str = ""
    consumer_uri: str = ""


@dataclass
class UnsubscribeRequest:
    entity_id: str = ""
    consumer_uri: str = ""


@dataclass
class GetRequest:
    entity_id: str = ""
    consumer_uri: str = ""


@dataclass
class SetRequest:
    entity_id: str = ""
    value: str = ""


@dataclass
class InvokeRequest:
    entity_id: str = ""
    consumer_uri: str = ""
    response_id: str = ""
    payload: str = ""


@dataclass
class StreamRequest:
    entity_id: str = ""


@dataclass
class Media:
    media_type: str = ""
    media_content: bytes = b""


@dataclass
class StreamResponse:
    media: Optional[Media] = None