"""Drive a skill through spoken phrases, launches, intents and session ends."""

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from ..errors import InvocationError
from ..models.envelope import SessionEndedReason, SkillResponse
from ..models.interaction_model import InteractionModel
from .context import SkillContext
from .invokers import Invoker
from .request_builder import SkillRequest
from .utterance import UtteranceMatcher

logger = logging.getLogger(__name__)

RequestFilter = Callable[[dict[str, Any]], None]


class SkillInteractor:
    """Simulates the platform side of a conversation with one skill.

    Each public operation performs one round trip and returns the skill's
    response payload. Operations on the same interactor are not queued:
    issuing a second call before the first has been awaited can observe
    session state that the first call is about to change. Await each round
    trip before starting the next when ordering matters.
    """

    def __init__(
        self,
        invoker: Invoker,
        model: InteractionModel,
        application_id: str | None = None,
        request_filter: RequestFilter | None = None,
        diagnostics: logging.Logger | None = None,
        **context_options: Any,
    ) -> None:
        self.invoker = invoker
        self.matcher = UtteranceMatcher(model)
        self.request_filter = request_filter
        self.diagnostics = diagnostics or logger
        self.skill_context = SkillContext(model, application_id=application_id, **context_options)

    def context(self) -> SkillContext:
        return self.skill_context

    def filter(self, request_filter: RequestFilter | None) -> None:
        """Install a hook that may mutate each envelope right before it is sent."""
        self.request_filter = request_filter

    async def spoken(self, text: str) -> dict[str, Any]:
        """Send the intent that ``text`` resolves to.

        Text that matches nothing is replaced by the model's default phrase.
        """
        utterance, used_fallback = self.matcher.match_or_default(text)
        if used_fallback:
            self.diagnostics.warning(
                f"No intent matches utterance: {text!r}. Using fallback utterance: {utterance.text!r}"
            )
        return await self._call_skill_with_intent(utterance.intent(), utterance.slots())

    async def launched(self) -> dict[str, Any]:
        request = SkillRequest(self.skill_context).launch_request()
        return await self.call_skill(request)

    async def intended(self, intent_name: str, slots: Mapping[str, str | None] | None = None) -> dict[str, Any]:
        """Send an intent directly, bypassing utterance matching."""
        return await self._call_skill_with_intent(intent_name, slots)

    async def session_ended(
        self,
        reason: SessionEndedReason = SessionEndedReason.USER_INITIATED,
        error_data: Any = None,
    ) -> dict[str, Any]:
        """Tell the skill its session ended, then end it whatever the skill replies."""
        try:
            reason = SessionEndedReason(reason)
            if reason == SessionEndedReason.ERROR:
                self.diagnostics.error(f"SessionEndedRequest:\n{json.dumps(error_data, indent=2, default=str)}")
            request = SkillRequest(self.skill_context).session_ended_request(reason, error_data)
            return await self.call_skill(request)
        finally:
            self.skill_context.end_session()

    async def call_skill(self, request: SkillRequest) -> dict[str, Any]:
        """Dispatch one request and apply the response to the session."""
        # Session is created at dispatch time, not when the request is built
        if request.requires_session() and not self.skill_context.active_session():
            self.skill_context.new_session()

        envelope = request.to_json()
        if self.request_filter is not None:
            self.request_filter(envelope)

        self.diagnostics.info(f"Calling skill: {envelope['request']['type']}")
        payload = await self.invoker(envelope)

        session = self.skill_context.session
        if self.skill_context.active_session():
            try:
                response = SkillResponse.model_validate(payload)
            except ValidationError as e:
                raise InvocationError(f"Skill returned a malformed response: {e}", envelope["request"]["type"]) from e
            session.used()
            if response.should_end_session():
                self.skill_context.end_session()
            elif response.returns_attributes():
                session.update_attributes(response.sessionAttributes)
        return payload

    async def _call_skill_with_intent(
        self, intent_name: str, slots: Mapping[str, str | None] | None = None
    ) -> dict[str, Any]:
        # Suspend playback first: the envelope must never report the device
        # as playing while it is handling a new intent
        audio_player = self.skill_context.audio_player
        if self.skill_context.audio_player_enabled and audio_player.is_playing():
            audio_player.suspend()

        request = SkillRequest(self.skill_context).intent_request(intent_name)
        if slots is not None:
            for slot_name, value in slots.items():
                request.with_slot(slot_name, value)
        return await self.call_skill(request)
