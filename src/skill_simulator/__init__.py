"""Simulate a voice platform conversing with a skill backend."""

from .errors import (
    InteractionModelError,
    InvocationError,
    RequestBuildError,
    SkillSimulatorError,
    UtteranceMatchError,
)
from .models import AudioPlayer, AudioPlayerState, InteractionModel, SessionEndedReason
from .services import SkillInteractor, local_invoker, remote_invoker

__version__ = "0.1.0"

__all__ = [
    "SkillInteractor",
    "InteractionModel",
    "SessionEndedReason",
    "AudioPlayer",
    "AudioPlayerState",
    "local_invoker",
    "remote_invoker",
    "SkillSimulatorError",
    "InteractionModelError",
    "UtteranceMatchError",
    "RequestBuildError",
    "InvocationError",
]
