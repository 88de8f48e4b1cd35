"""Simulator services: matching, request building and skill invocation."""

from .context import SkillContext
from .interactor import SkillInteractor
from .invokers import Invoker, InvokerKind, invoker_from_settings, load_handler, local_invoker, remote_invoker
from .request_builder import SkillRequest
from .utterance import Utterance, UtteranceMatcher

__all__ = [
    "SkillInteractor",
    "SkillContext",
    "SkillRequest",
    "Utterance",
    "UtteranceMatcher",
    "Invoker",
    "InvokerKind",
    "local_invoker",
    "remote_invoker",
    "load_handler",
    "invoker_from_settings",
]
