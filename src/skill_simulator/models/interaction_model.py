"""Interaction model: intents, sample phrases and slot types of a skill."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import InteractionModelError

logger = logging.getLogger(__name__)

HELP_INTENT = "AMAZON.HelpIntent"

# Samples given to built-in intents that a model declares without any
BUILTIN_SAMPLES: dict[str, list[str]] = {
    HELP_INTENT: ["help", "help me", "what can I ask you", "what can you do"],
    "AMAZON.StopIntent": ["stop", "off", "shut up"],
    "AMAZON.CancelIntent": ["cancel", "never mind", "forget it"],
    "AMAZON.PauseIntent": ["pause", "pause playback"],
    "AMAZON.ResumeIntent": ["resume", "continue", "keep going"],
    "AMAZON.NextIntent": ["next", "skip", "skip forward"],
    "AMAZON.PreviousIntent": ["previous", "go back", "skip back"],
    "AMAZON.YesIntent": ["yes", "yeah", "sure"],
    "AMAZON.NoIntent": ["no", "nope"],
    "AMAZON.FallbackIntent": [],
}

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
_PUNCTUATION = re.compile(r"[^\w\s']")


def tokenize(text: str) -> list[str]:
    """Strip punctuation and split on whitespace, keeping the original case.

    Apostrophes survive only inside a word, as in contractions.
    """
    tokens = (token.strip("'") for token in _PUNCTUATION.sub(" ", text).split())
    return [token for token in tokens if token]


def normalize(text: str) -> list[str]:
    """Case-fold, strip punctuation and split on whitespace."""
    return [token.casefold() for token in tokenize(text)]


@dataclass(frozen=True)
class TemplateToken:
    """One token of a phrase template: a literal word or a slot placeholder."""

    value: str
    is_slot: bool = False


def parse_template(sample: str) -> list[TemplateToken]:
    """Split a sample phrase like ``play {song} by {artist}`` into tokens.

    Placeholders in the older ``{literal|SlotName}`` form resolve to the
    slot name after the last pipe.
    """
    tokens: list[TemplateToken] = []
    position = 0
    for match in _PLACEHOLDER.finditer(sample):
        tokens.extend(TemplateToken(word) for word in normalize(sample[position:match.start()]))
        slot_name = match.group(1).split("|")[-1].strip()
        if not slot_name:
            raise InteractionModelError(f"Empty slot placeholder in sample: {sample!r}")
        tokens.append(TemplateToken(slot_name, is_slot=True))
        position = match.end()
    tokens.extend(TemplateToken(word) for word in normalize(sample[position:]))
    return tokens


class SlotType(BaseModel):
    """Custom slot type with its sample values."""

    model_config = ConfigDict(frozen=True)

    name: str
    values: list[str] = Field(default_factory=list)


class IntentSlot(BaseModel):
    """Slot declared on an intent."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class Intent(BaseModel):
    """Intent with its sample phrase templates and slots."""

    model_config = ConfigDict(frozen=True)

    name: str
    samples: list[str] = Field(default_factory=list)
    slots: list[IntentSlot] = Field(default_factory=list)

    def slot(self, name: str) -> IntentSlot | None:
        for slot in self.slots:
            if slot.name == name:
                return slot
        return None

    def slot_names(self) -> set[str]:
        return {slot.name for slot in self.slots}


class InteractionModel(BaseModel):
    """Immutable description of a skill's language model.

    Intents are kept in declaration order, which is the tie-break the
    utterance matcher relies on.
    """

    model_config = ConfigDict(frozen=True)

    intents: list[Intent]
    types: list[SlotType] = Field(default_factory=list)
    fallback_phrase: str | None = Field(None, description="Phrase used when nothing matches")

    @model_validator(mode="after")
    def _validate(self) -> InteractionModel:
        names = [intent.name for intent in self.intents]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            raise InteractionModelError(f"Duplicate intents: {sorted(duplicates)}")

        type_names = {slot_type.name for slot_type in self.types}
        for intent in self.intents:
            for slot in intent.slots:
                if slot.type not in type_names and not slot.type.startswith("AMAZON."):
                    raise InteractionModelError(
                        f"Slot {slot.name} on {intent.name} uses undeclared type {slot.type}"
                    )
            for sample in intent.samples:
                for token in parse_template(sample):
                    if token.is_slot and intent.slot(token.value) is None:
                        raise InteractionModelError(
                            f"Sample {sample!r} on {intent.name} references undeclared slot {token.value}"
                        )

        if not any(intent.samples for intent in self.intents) and not self.fallback_phrase:
            raise InteractionModelError("Interaction model has no sample phrases")
        return self

    def intent(self, name: str) -> Intent | None:
        for intent in self.intents:
            if intent.name == name:
                return intent
        return None

    def has_intent(self, name: str) -> bool:
        return self.intent(name) is not None

    def intent_names(self) -> list[str]:
        return [intent.name for intent in self.intents]

    def slot_type(self, name: str) -> SlotType | None:
        for slot_type in self.types:
            if slot_type.name == name:
                return slot_type
        return None

    def default_phrase(self) -> str:
        """Phrase the interactor falls back to when input matches nothing.

        Slot placeholders are filled with the first sample value of the
        slot's type, or the slot name when the type has no samples.
        """
        if self.fallback_phrase:
            return self.fallback_phrase

        help_intent = self.intent(HELP_INTENT)
        if help_intent is not None and help_intent.samples:
            intent, sample = help_intent, help_intent.samples[0]
        else:
            intent = next(intent for intent in self.intents if intent.samples)
            sample = intent.samples[0]

        words = []
        for token in parse_template(sample):
            if not token.is_slot:
                words.append(token.value)
                continue
            slot = intent.slot(token.value)
            slot_type = self.slot_type(slot.type) if slot else None
            words.append(slot_type.values[0] if slot_type and slot_type.values else token.value)
        return " ".join(words)

    @classmethod
    def from_dict(cls, data: dict[str, Any], fallback_phrase: str | None = None) -> InteractionModel:
        """Build a model from the platform's interaction model JSON.

        Accepts the full ``{"interactionModel": {"languageModel": ...}}``
        document, the bare ``languageModel`` object, or ``{intents, types}``.
        """
        try:
            intents, types = _read_language_model(data)
            return cls(intents=intents, types=types, fallback_phrase=fallback_phrase)
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise InteractionModelError(f"Malformed interaction model ({type(e).__name__}): {e}") from e

    @classmethod
    def from_file(cls, path: Path | str, fallback_phrase: str | None = None) -> InteractionModel:
        """Load an interaction model JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InteractionModelError(f"Invalid interaction model JSON in {path}: {e}") from e
        logger.debug(f"Loaded interaction model from {path}")
        return cls.from_dict(data, fallback_phrase=fallback_phrase)

    @classmethod
    def from_legacy(
        cls,
        intent_schema: dict[str, Any],
        sample_utterances: str,
        custom_types: dict[str, list[str]] | None = None,
        fallback_phrase: str | None = None,
    ) -> InteractionModel:
        """Build a model from an intent schema plus a sample utterances file.

        Each non-blank line of ``sample_utterances`` reads
        ``IntentName phrase with {slot}``.
        """
        samples: dict[str, list[str]] = {}
        for line_number, line in enumerate(sample_utterances.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            parts = line.split(None, 1)
            if len(parts) != 2:
                raise InteractionModelError(f"Sample utterance line {line_number} has no phrase: {line!r}")
            samples.setdefault(parts[0], []).append(parts[1])

        intents = []
        try:
            for raw_intent in intent_schema.get("intents", []):
                name = raw_intent["intent"]
                intents.append(
                    {
                        "name": name,
                        "samples": samples.pop(name, []),
                        "slots": raw_intent.get("slots") or [],
                    }
                )
        except (KeyError, TypeError, AttributeError) as e:
            raise InteractionModelError(f"Malformed intent schema ({type(e).__name__}): {e}") from e
        if samples:
            raise InteractionModelError(f"Samples given for undeclared intents: {sorted(samples)}")

        types = [
            {"name": name, "values": list(values)} for name, values in (custom_types or {}).items()
        ]
        return cls.from_dict({"intents": intents, "types": types}, fallback_phrase=fallback_phrase)


def _read_language_model(data: dict[str, Any]) -> tuple[list[Intent], list[SlotType]]:
    language_model = data.get("interactionModel", data)
    language_model = language_model.get("languageModel", language_model)
    if "intents" not in language_model:
        raise InteractionModelError("Interaction model has no intents")

    intents = []
    for raw_intent in language_model["intents"]:
        samples = list(raw_intent.get("samples") or [])
        if not samples:
            samples = list(BUILTIN_SAMPLES.get(raw_intent["name"], []))
        intents.append(
            Intent(
                name=raw_intent["name"],
                samples=samples,
                slots=[IntentSlot(name=s["name"], type=s["type"]) for s in raw_intent.get("slots") or []],
            )
        )

    types = []
    for raw_type in language_model.get("types") or []:
        values: list[str] = []
        for raw_value in raw_type.get("values") or []:
            if isinstance(raw_value, str):
                values.append(raw_value)
                continue
            name = raw_value["name"]
            values.append(name["value"])
            values.extend(name.get("synonyms") or [])
        types.append(SlotType(name=raw_type["name"], values=values))

    return intents, types
