"""Conversation session state."""

import logging
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)


class SkillSession:
    """Platform session spanning one or more request/response round trips.

    A session starts new and active. It stops being new after its first
    completed round trip and stops being active once ended; an ended
    session is never reactivated.
    """

    def __init__(self) -> None:
        self.id = f"SessionID.{uuid4()}"
        self.attributes: dict[str, Any] = {}
        self.new = True
        self.active = True
        logger.debug(f"Session created: {self.id}")

    def used(self) -> None:
        """Mark one round trip as completed."""
        self.new = False

    def end(self) -> None:
        self.active = False
        logger.debug(f"Session ended: {self.id}")

    def update_attributes(self, attributes: dict[str, Any] | None) -> None:
        """Replace the attributes wholesale with those returned by the skill."""
        self.attributes = dict(attributes) if attributes else {}
