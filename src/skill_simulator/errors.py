"""Exceptions raised by the skill simulator."""


class SkillSimulatorError(Exception):
    """Base class for all simulator errors."""


class InteractionModelError(SkillSimulatorError):
    """The interaction model is malformed."""


class UtteranceMatchError(SkillSimulatorError):
    """Even the model's default phrase could not be matched."""


class RequestBuildError(SkillSimulatorError):
    """A request envelope could not be constructed."""


class InvocationError(SkillSimulatorError):
    """The skill backend could not be called or returned garbage."""

    def __init__(self, message: str, request_type: str | None = None) -> None:
        super().__init__(message)
        self.request_type = request_type
