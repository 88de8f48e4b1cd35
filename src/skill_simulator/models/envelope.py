"""Request envelope and skill response models."""

import copy
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RequestType(str, Enum):
    """Request types the simulator can send."""

    LAUNCH = "LaunchRequest"
    INTENT = "IntentRequest"
    SESSION_ENDED = "SessionEndedRequest"


class SessionEndedReason(str, Enum):
    """Why a session ended."""

    USER_INITIATED = "USER_INITIATED"
    ERROR = "ERROR"
    EXCEEDED_MAX_REPROMPTS = "EXCEEDED_MAX_REPROMPTS"


class Application(BaseModel):
    applicationId: str


class User(BaseModel):
    userId: str


class EnvelopeSession(BaseModel):
    """Session block of the request envelope."""

    sessionId: str
    new: bool
    attributes: dict[str, Any] = {}
    application: Application
    user: User


class Device(BaseModel):
    deviceId: str
    supportedInterfaces: dict[str, Any] = {}


class SystemContext(BaseModel):
    application: Application
    user: User
    device: Device


class RequestContext(BaseModel):
    """Device context block of the request envelope."""

    System: SystemContext
    AudioPlayer: dict[str, Any] | None = None


class Slot(BaseModel):
    """Slot value sent with an intent."""

    name: str
    value: str


class IntentBlock(BaseModel):
    name: str
    slots: dict[str, Slot] = {}


# Error sent with a session-ended request when the caller supplies none
DEFAULT_SESSION_ENDED_ERROR: dict[str, Any] = {"type": "INTERNAL_ERROR", "message": ""}


class RequestBlock(BaseModel):
    """Request block; its optional fields depend on the request type."""

    type: RequestType
    requestId: str
    timestamp: str
    locale: str = "en-US"
    intent: IntentBlock | None = None
    reason: SessionEndedReason | None = None
    error: Any = None


class RequestEnvelope(BaseModel):
    """Full request envelope sent to the skill."""

    version: str = "1.0"
    session: EnvelopeSession
    context: RequestContext
    request: RequestBlock

    def to_json(self) -> dict[str, Any]:
        """Serialize to the plain JSON-compatible payload sent to the skill."""
        payload = self.model_dump(mode="json", exclude_none=True, exclude={"request": {"error"}})
        # Attributes and error payloads are opaque and go out verbatim
        payload["session"]["attributes"] = copy.deepcopy(self.session.attributes)
        if self.request.error is not None:
            payload["request"]["error"] = copy.deepcopy(self.request.error)
        return payload


class SkillResponse(BaseModel):
    """Response payload returned by the skill.

    Only the session-related fields are interpreted; everything else is
    kept as opaque extra data.
    """

    model_config = ConfigDict(extra="allow")

    version: str | None = None
    response: dict[str, Any] | None = None
    sessionAttributes: dict[str, Any] | None = Field(None, description="Returned session state")
    shouldEndSession: bool | None = None

    def should_end_session(self) -> bool:
        """Whether the skill asked to close the session.

        Reads the top-level flag, falling back to the nested
        ``response.shouldEndSession`` used by the platform's wire format.
        """
        if self.shouldEndSession is not None:
            return self.shouldEndSession
        if self.response:
            return bool(self.response.get("shouldEndSession"))
        return False

    def returns_attributes(self) -> bool:
        """Whether the response carries the attributes field at all, even if empty."""
        return "sessionAttributes" in self.model_fields_set
