"""Resolve free-text utterances to intents and slot values."""

import logging
from dataclasses import dataclass, field

from ..errors import UtteranceMatchError
from ..models.interaction_model import InteractionModel, TemplateToken, normalize, parse_template, tokenize

logger = logging.getLogger(__name__)


@dataclass
class Utterance:
    """Input text together with its match result, if any."""

    text: str
    intent_name: str | None = None
    slot_values: dict[str, str] = field(default_factory=dict)

    def matched(self) -> bool:
        return self.intent_name is not None

    def intent(self) -> str:
        if self.intent_name is None:
            raise UtteranceMatchError(f"Utterance did not match any intent: {self.text!r}")
        return self.intent_name

    def slots(self) -> dict[str, str]:
        if self.intent_name is None:
            raise UtteranceMatchError(f"Utterance did not match any intent: {self.text!r}")
        return dict(self.slot_values)

    def __str__(self) -> str:
        return self.text


class UtteranceMatcher:
    """Matches text against every sample phrase of an interaction model.

    Templates are tried intent by intent, sample by sample, in declaration
    order. The first one that aligns wins; there is no scoring.
    """

    def __init__(self, model: InteractionModel) -> None:
        self.model = model
        self._templates: list[tuple[str, list[TemplateToken]]] = [
            (intent.name, parse_template(sample)) for intent in model.intents for sample in intent.samples
        ]

    def match(self, text: str) -> Utterance:
        raw_tokens = tokenize(text)
        tokens = normalize(text)
        for intent_name, template in self._templates:
            slots = _align(template, tokens, raw_tokens, 0, 0, {})
            if slots is not None:
                logger.debug(f"Matched {text!r} to {intent_name} with slots {slots}")
                return Utterance(text=text, intent_name=intent_name, slot_values=slots)
        return Utterance(text=text)

    def match_or_default(self, text: str) -> tuple[Utterance, bool]:
        """Match ``text``, falling back to the model's default phrase.

        Returns the utterance and whether the fallback was used.
        """
        utterance = self.match(text)
        if utterance.matched():
            return utterance, False

        default_phrase = self.model.default_phrase()
        fallback = self.match(default_phrase)
        if not fallback.matched():
            raise UtteranceMatchError(f"Default phrase matches no intent: {default_phrase!r}")
        return fallback, True


def _align(
    template: list[TemplateToken],
    tokens: list[str],
    raw_tokens: list[str],
    t: int,
    i: int,
    slots: dict[str, str],
) -> dict[str, str] | None:
    """Align template tokens from ``t`` onto input tokens from ``i``.

    Literals must equal the input token. A slot takes one or more tokens:
    everything left when it is the last template token, otherwise the
    shortest span after which the rest of the template still aligns.

    Comparison uses the case-folded ``tokens``, but captured slot values
    are joined from ``raw_tokens`` so they keep the caller's casing.
    """
    if t == len(template):
        return slots if i == len(tokens) else None

    token = template[t]
    if not token.is_slot:
        if i < len(tokens) and tokens[i] == token.value:
            return _align(template, tokens, raw_tokens, t + 1, i + 1, slots)
        return None

    if t == len(template) - 1:
        if i < len(tokens):
            return {**slots, token.value: " ".join(raw_tokens[i:])}
        return None

    for end in range(i + 1, len(tokens) + 1):
        captured = {**slots, token.value: " ".join(raw_tokens[i:end])}
        result = _align(template, tokens, raw_tokens, t + 1, end, captured)
        if result is not None:
            return result
    return None
