"""Pydantic models shared by the dispatcher, the normalizer and the front ends."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Closed set of ways a dispatch can fail."""

    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    REMOTE_ERROR = "remote_error"
    EMPTY_BODY = "empty_body"
    MALFORMED_PAYLOAD = "malformed_payload"
    UNRECOGNIZED_SHAPE = "unrecognized_shape"
    UNKNOWN = "unknown"


class Success(BaseModel):
    """Canonical reply text extracted from the remote agent."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    content: str


class Failure(BaseModel):
    """Typed failure of a single dispatch."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    kind: ErrorKind
    detail: str = ""
    status: int | None = Field(
        default=None, description="HTTP status, set only for remote errors"
    )


Outcome = Union[Success, Failure]


class Message(BaseModel):
    """A single chat entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class EndpointConfig(BaseModel):
    """The remote agent endpoint, read once per dispatch."""

    url: str


class ProbeResult(BaseModel):
    """Result of a connection probe."""

    ok: bool
    message: str
    status: int | None = None
