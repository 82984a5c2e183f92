"""
Audio error types.

None of these escape the AudioManager public API; they travel as rejection
reasons on PendingPlayback and end up in the log.
"""


class AudioError(Exception):
    """Base class for audio subsystem errors."""


class PlaybackRejected(AudioError):
    """The media backend refused to start playback."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        self.reason = reason
        message = f"Playback rejected for '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
