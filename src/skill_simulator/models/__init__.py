"""Data models for interaction models, envelopes and device state."""

from .audio_player import AudioPlayer, AudioPlayerState
from .envelope import RequestEnvelope, RequestType, SessionEndedReason, SkillResponse
from .interaction_model import Intent, IntentSlot, InteractionModel, SlotType
from .session import SkillSession

__all__ = [
    "InteractionModel",
    "Intent",
    "IntentSlot",
    "SlotType",
    "RequestEnvelope",
    "RequestType",
    "SessionEndedReason",
    "SkillResponse",
    "SkillSession",
    "AudioPlayer",
    "AudioPlayerState",
]
