"""
Media backend for the audio coordinator.

A SoundHandle is the playable object the coordinator drives: it can be
paused, rewound and played, carries its own volume and mute flag, and tells
its listeners when playback reaches the end. Starting playback is not
assumed to be instantaneous, so play() hands back a PendingPlayback that the
backend resolves or rejects later.

The pygame implementations below use pygame.mixer.Sound for effects and
pygame.mixer.music for the background track.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Protocol

import pygame

from memorama.audio.errors import PlaybackRejected

logger = logging.getLogger(__name__)


class PlaybackOutcome(Enum):
    """How a play request ended up."""
    STARTED = auto()
    REJECTED_ASYNC = auto()
    REJECTED_SYNC = auto()


RejectionCallback = Callable[[BaseException], None]


class PendingPlayback:
    """
    Result of a play request.

    Starts out pending (outcome is None). The backend settles it exactly once
    with resolve() or reject(); later calls are ignored. Rejection callbacks
    registered after the fact run immediately.

    Backends must settle from the game-loop thread, the same one that drives
    the AudioManager.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.outcome: PlaybackOutcome | None = None
        self.error: BaseException | None = None
        self._rejection_callbacks: list[RejectionCallback] = []

    @classmethod
    def started(cls, name: str = "") -> PendingPlayback:
        pending = cls(name)
        pending.resolve()
        return pending

    @classmethod
    def rejected(cls, error: BaseException, name: str = "") -> PendingPlayback:
        pending = cls(name)
        pending.reject(error)
        return pending

    @classmethod
    def failed(cls, error: BaseException, name: str = "") -> PendingPlayback:
        """A request refused on the spot: it raised, or the backend said no synchronously."""
        pending = cls(name)
        pending.outcome = PlaybackOutcome.REJECTED_SYNC
        pending.error = error
        return pending

    @property
    def done(self) -> bool:
        return self.outcome is not None

    @property
    def is_rejected(self) -> bool:
        return self.outcome in (PlaybackOutcome.REJECTED_ASYNC, PlaybackOutcome.REJECTED_SYNC)

    def resolve(self) -> None:
        if self.done:
            return
        self.outcome = PlaybackOutcome.STARTED
        self._rejection_callbacks.clear()

    def reject(self, error: BaseException) -> None:
        if self.done:
            return
        self.outcome = PlaybackOutcome.REJECTED_ASYNC
        self.error = error
        callbacks, self._rejection_callbacks = self._rejection_callbacks, []
        for callback in callbacks:
            callback(error)

    def on_rejected(self, callback: RejectionCallback) -> None:
        if self.is_rejected:
            callback(self.error)
        elif not self.done:
            self._rejection_callbacks.append(callback)

    def __repr__(self) -> str:
        state = self.outcome.name if self.outcome else "PENDING"
        return f"PendingPlayback({self.name!r}, {state})"


class SoundHandle(ABC):
    """
    Playable resource driven by the AudioManager.

    Subclasses apply volume/mute in _apply_volume() and call _notify_ended()
    when playback reaches the end on its own (not on pause or rewind).
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._volume: float = 1.0
        self._muted: bool = False
        self._end_listeners: list[Callable[[], None]] = []

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = max(0.0, min(1.0, value))
        self._apply_volume()

    @property
    def muted(self) -> bool:
        return self._muted

    @muted.setter
    def muted(self, value: bool) -> None:
        self._muted = bool(value)
        self._apply_volume()

    @property
    def effective_volume(self) -> float:
        """Volume actually sent to the mixer."""
        return 0.0 if self._muted else self._volume

    @abstractmethod
    def pause(self) -> None:
        """Pause playback, keeping the position."""

    @abstractmethod
    def rewind(self) -> None:
        """Move the position back to the start."""

    @abstractmethod
    def play(self) -> PendingPlayback:
        """Request playback from the current position."""

    @abstractmethod
    def _apply_volume(self) -> None:
        pass

    def poll(self) -> None:
        """Detect end of playback for backends that cannot push it."""

    def add_end_listener(self, listener: Callable[[], None]) -> None:
        self._end_listeners.append(listener)

    def remove_end_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._end_listeners:
            self._end_listeners.remove(listener)

    def _notify_ended(self) -> None:
        for listener in list(self._end_listeners):
            listener()


class PygameSoundHandle(SoundHandle):
    """
    Sound effect backed by pygame.mixer.Sound.

    pygame has no seek for Sound objects, so "rewind" stops the channel and
    the next play() starts again from zero on a fresh channel.
    """

    def __init__(self, sound: pygame.mixer.Sound, name: str = ""):
        super().__init__(name)
        self._sound = sound
        self._channel: pygame.mixer.Channel | None = None
        self._paused: bool = False
        self._apply_volume()

    @property
    def channel(self) -> pygame.mixer.Channel | None:
        return self._channel

    def _apply_volume(self) -> None:
        self._sound.set_volume(self.effective_volume)

    def _owns_channel(self) -> bool:
        """False once the channel has been freed or handed to another Sound."""
        return self._channel is not None and self._channel.get_sound() is self._sound

    def pause(self) -> None:
        if self._owns_channel():
            self._channel.pause()
            self._paused = True

    def rewind(self) -> None:
        if self._owns_channel():
            self._channel.stop()
        self._channel = None
        self._paused = False

    def play(self) -> PendingPlayback:
        channel = self._sound.play()
        if channel is None:
            # Every mixer channel is busy
            return PendingPlayback.failed(
                PlaybackRejected(self.name, "no free mixer channel"), self.name
            )
        self._channel = channel
        self._paused = False
        return PendingPlayback.started(self.name)

    def poll(self) -> None:
        if self._channel is None or self._paused:
            return
        if not self._owns_channel() or not self._channel.get_busy():
            self._channel = None
            self._notify_ended()


class PygameMusicHandle(SoundHandle):
    """
    Background track streamed through pygame.mixer.music.

    There is only one music stream, so at most one of these should be
    registered at a time.
    """

    def __init__(self, track_path: str, name: str = "", loops: int = -1):
        super().__init__(name)
        self.track_path = track_path
        self.loops = loops
        self._playing: bool = False
        self._paused: bool = False

    def _apply_volume(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.set_volume(self.effective_volume)

    def pause(self) -> None:
        if pygame.mixer.get_init() and self._playing:
            pygame.mixer.music.pause()
            self._paused = True

    def rewind(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.stop()
        self._playing = False
        self._paused = False

    def play(self) -> PendingPlayback:
        if not pygame.mixer.get_init():
            return PendingPlayback.failed(
                PlaybackRejected(self.name, "audio system not initialized"), self.name
            )
        try:
            pygame.mixer.music.load(self.track_path)
            pygame.mixer.music.play(loops=self.loops)
        except pygame.error as e:
            return PendingPlayback.failed(PlaybackRejected(self.name, str(e)), self.name)

        pygame.mixer.music.set_volume(self.effective_volume)
        self._playing = True
        self._paused = False
        logger.info(f"Playing BGM: {self.track_path}")
        return PendingPlayback.started(self.name)

    def poll(self) -> None:
        if not self._playing or self._paused or not pygame.mixer.get_init():
            return
        if not pygame.mixer.music.get_busy():
            self._playing = False
            self._notify_ended()


class AssetProvider(Protocol):
    """Source of playable handles, looked up by asset identifier."""

    def get_handle(self, identifier: str) -> SoundHandle | None:
        ...

    def get_music_handle(self, identifier: str) -> SoundHandle | None:
        ...


class PygameAssetProvider:
    """
    Loads handles from audio files in a directory.

    An identifier maps to the first existing "<identifier><ext>" file.
    Missing files and decode errors yield None.
    """

    def __init__(self, asset_dir: Path | str, extensions: tuple[str, ...] = (".ogg", ".wav", ".mp3")):
        self.asset_dir = Path(asset_dir)
        self.extensions = extensions

    def find(self, identifier: str) -> Path | None:
        for ext in self.extensions:
            candidate = self.asset_dir / f"{identifier}{ext}"
            if candidate.exists():
                return candidate
        return None

    def get_handle(self, identifier: str) -> SoundHandle | None:
        path = self.find(identifier)
        if path is None:
            logger.debug(f"Audio file not found for '{identifier}' in {self.asset_dir}")
            return None
        try:
            sound = pygame.mixer.Sound(str(path))
        except pygame.error as e:
            logger.error(f"Failed to load sound {path}: {e}")
            return None
        return PygameSoundHandle(sound, name=identifier)

    def get_music_handle(self, identifier: str) -> SoundHandle | None:
        path = self.find(identifier)
        if path is None:
            logger.debug(f"Music file not found for '{identifier}' in {self.asset_dir}")
            return None
        return PygameMusicHandle(str(path), name=identifier)
