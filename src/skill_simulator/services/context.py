"""State of one simulated conversation with a skill."""

import logging

from ..config import settings
from ..models.audio_player import AudioPlayer
from ..models.envelope import Application, Device, RequestContext, SystemContext, User
from ..models.interaction_model import InteractionModel
from ..models.session import SkillSession

logger = logging.getLogger(__name__)


class SkillContext:
    """Owns the session and audio player for one simulated conversation.

    The interaction model is shared and never modified. The audio player
    outlives individual sessions, since playback is device state.
    """

    def __init__(
        self,
        model: InteractionModel,
        application_id: str | None = None,
        audio_player: AudioPlayer | None = None,
        audio_player_enabled: bool | None = None,
        locale: str | None = None,
        user_id: str | None = None,
        device_id: str | None = None,
    ) -> None:
        self.model = model
        self.application_id = application_id or settings.application_id
        self.audio_player = audio_player or AudioPlayer()
        self.audio_player_enabled = (
            settings.audio_player_enabled if audio_player_enabled is None else audio_player_enabled
        )
        self.locale = locale or settings.locale
        self.user_id = user_id or settings.user_id
        self.device_id = device_id or settings.device_id
        self.session: SkillSession | None = None
        self.new_session()

    def new_session(self) -> SkillSession:
        """Start a brand-new session, replacing any previous one."""
        self.session = SkillSession()
        return self.session

    def end_session(self) -> None:
        if self.session is not None:
            self.session.end()

    def active_session(self) -> bool:
        return self.session is not None and self.session.active

    def to_context(self) -> RequestContext:
        """Device context block describing this conversation's device."""
        supported_interfaces = {"AudioPlayer": {}} if self.audio_player_enabled else {}
        return RequestContext(
            System=SystemContext(
                application=Application(applicationId=self.application_id),
                user=User(userId=self.user_id),
                device=Device(deviceId=self.device_id, supportedInterfaces=supported_interfaces),
            ),
            AudioPlayer=self.audio_player.to_context() if self.audio_player_enabled else None,
        )
