"""Simulated device audio player."""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class AudioPlayerState(str, Enum):
    """Playback state of the device."""

    IDLE = "IDLE"
    PLAYING = "PLAYING"
    SUSPENDED = "SUSPENDED"


# How each state is reported in the request context
PLAYER_ACTIVITY: dict[AudioPlayerState, str] = {
    AudioPlayerState.IDLE: "IDLE",
    AudioPlayerState.PLAYING: "PLAYING",
    AudioPlayerState.SUSPENDED: "STOPPED",
}


class AudioPlayer:
    """Device-level playback state, independent of any session."""

    def __init__(self) -> None:
        self.state = AudioPlayerState.IDLE
        self.token: str | None = None
        self.url: str | None = None
        self.offset_ms = 0

    def is_playing(self) -> bool:
        return self.state == AudioPlayerState.PLAYING

    def play(self, token: str, url: str, offset_ms: int = 0) -> None:
        """Start playing an item, replacing whatever was current."""
        self.state = AudioPlayerState.PLAYING
        self.token = token
        self.url = url
        self.offset_ms = offset_ms
        logger.debug(f"Audio player playing {token} from {offset_ms}ms")

    def suspend(self) -> None:
        """Suspend playback while the user talks to the device.

        Only meaningful while playing; otherwise a no-op.
        """
        if self.state != AudioPlayerState.PLAYING:
            return
        self.state = AudioPlayerState.SUSPENDED
        logger.debug(f"Audio player suspended at {self.token}")

    def resume(self) -> None:
        if self.state != AudioPlayerState.SUSPENDED:
            return
        self.state = AudioPlayerState.PLAYING
        logger.debug(f"Audio player resumed {self.token}")

    def stop(self) -> None:
        self.state = AudioPlayerState.IDLE
        self.token = None
        self.url = None
        self.offset_ms = 0

    def to_context(self) -> dict[str, object]:
        """AudioPlayer block of the request context."""
        block: dict[str, object] = {"playerActivity": PLAYER_ACTIVITY[self.state]}
        if self.state != AudioPlayerState.IDLE:
            block["token"] = self.token
            block["offsetInMilliseconds"] = self.offset_ms
        return block
