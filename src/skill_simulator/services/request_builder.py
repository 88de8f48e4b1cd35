"""Build protocol-correct request envelopes from a skill context."""

import copy
import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from ..config import settings
from ..errors import RequestBuildError
from ..models.envelope import (
    DEFAULT_SESSION_ENDED_ERROR,
    Application,
    EnvelopeSession,
    IntentBlock,
    RequestBlock,
    RequestEnvelope,
    RequestType,
    SessionEndedReason,
    Slot,
    User,
)
from .context import SkillContext

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class SkillRequest:
    """One request to the skill, serialized against the context's current state.

    The session block is read when the envelope is built, not when the
    request is created, so a session started just before dispatch is the
    one the skill sees.
    """

    def __init__(self, context: SkillContext) -> None:
        self.context = context
        self.request_type: RequestType | None = None
        self.request_id = f"amzn1.echo-api.request.{uuid4()}"
        self.timestamp = _timestamp()
        self.intent_name: str | None = None
        self.slots: dict[str, Slot] = {}
        self.reason: SessionEndedReason | None = None
        self.error: Any = None

    def launch_request(self) -> "SkillRequest":
        self.request_type = RequestType.LAUNCH
        return self

    def intent_request(self, intent_name: str) -> "SkillRequest":
        if not intent_name:
            raise RequestBuildError("Intent name must not be empty")
        self.request_type = RequestType.INTENT
        self.intent_name = intent_name
        return self

    def with_slot(self, name: str, value: str | None) -> "SkillRequest":
        """Add one slot to an intent request; a value of None leaves it out."""
        if self.request_type != RequestType.INTENT:
            raise RequestBuildError("Slots can only be added to an intent request")
        if value is None:
            return self
        try:
            self.slots[name] = Slot(name=name, value=value)
        except ValidationError as e:
            raise RequestBuildError(f"Invalid slot {name!r}: {e}") from e
        return self

    def session_ended_request(self, reason: SessionEndedReason, error_data: Any = None) -> "SkillRequest":
        """Session-ended request; for reason ERROR the error data is attached as given."""
        self.request_type = RequestType.SESSION_ENDED
        self.reason = SessionEndedReason(reason)
        if self.reason == SessionEndedReason.ERROR:
            self.error = copy.deepcopy(DEFAULT_SESSION_ENDED_ERROR if error_data is None else error_data)
        return self

    def requires_session(self) -> bool:
        """Every request type the simulator sends belongs to a session."""
        return True

    def to_envelope(self) -> RequestEnvelope:
        if self.request_type is None:
            raise RequestBuildError("Request type was never set")
        session = self.context.session
        if session is None:
            raise RequestBuildError("Cannot build a request without a session")

        request = RequestBlock(
            type=self.request_type,
            requestId=self.request_id,
            timestamp=self.timestamp,
            locale=self.context.locale,
        )
        if self.request_type == RequestType.INTENT:
            request.intent = IntentBlock(name=self.intent_name, slots=dict(self.slots))
        elif self.request_type == RequestType.SESSION_ENDED:
            request.reason = self.reason
            request.error = self.error

        return RequestEnvelope(
            version=settings.protocol_version,
            session=EnvelopeSession(
                sessionId=session.id,
                new=session.new,
                attributes=session.attributes,
                application=Application(applicationId=self.context.application_id),
                user=User(userId=self.context.user_id),
            ),
            context=self.context.to_context(),
            request=request,
        )

    def to_json(self) -> dict[str, Any]:
        return self.to_envelope().to_json()
