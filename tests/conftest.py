import os
import sys
import pytest
from unittest.mock import patch

# Ensure memorama can be imported without installing
sys.path.append(os.getcwd())

from memorama.audio.backend import PendingPlayback, SoundHandle
from memorama.audio.catalog import DEFAULT_CATALOG
from memorama.audio.errors import PlaybackRejected


@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame.mixer to allow headless testing.
    Autoused so no test ever opens a real audio device.
    """
    with patch('pygame.mixer'):
        yield


class FakeHandle(SoundHandle):
    """
    In-memory SoundHandle that records every call.

    play_mode:
        "start"   - play() resolves immediately
        "pending" - play() returns an unsettled PendingPlayback (last_pending)
        "reject"  - play() returns an already rejected PendingPlayback
        "raise"   - play() raises
    """

    def __init__(self, name: str = "", play_mode: str = "start"):
        super().__init__(name)
        self.play_mode = play_mode
        self.calls: list[str] = []
        self.playing = False
        self.last_pending: PendingPlayback | None = None
        self.ends_on_poll = False

    def _apply_volume(self) -> None:
        pass

    def pause(self) -> None:
        self.calls.append("pause")
        self.playing = False

    def rewind(self) -> None:
        self.calls.append("rewind")

    def play(self) -> PendingPlayback:
        self.calls.append("play")
        if self.play_mode == "raise":
            raise RuntimeError("backend exploded")
        if self.play_mode == "reject":
            return PendingPlayback.rejected(PlaybackRejected(self.name, "autoplay blocked"), self.name)
        self.playing = True
        if self.play_mode == "pending":
            self.last_pending = PendingPlayback(self.name)
            return self.last_pending
        return PendingPlayback.started(self.name)

    def poll(self) -> None:
        if self.ends_on_poll and self.playing:
            self.finish()

    def finish(self) -> None:
        """Simulate natural end of playback."""
        self.playing = False
        self._notify_ended()


class FakeProvider:
    """AssetProvider serving FakeHandles for every catalog identifier not in `missing`."""

    def __init__(self, missing=(), music=True):
        self.missing = set(missing)
        self.music = music
        self.handles: dict[str, FakeHandle] = {}
        self.music_handle: FakeHandle | None = None

    def get_handle(self, identifier):
        name = identifier[len(DEFAULT_CATALOG.element_prefix):]
        if name in self.missing:
            return None
        handle = FakeHandle(name)
        self.handles[name] = handle
        return handle

    def get_music_handle(self, identifier):
        if not self.music:
            return None
        self.music_handle = FakeHandle(identifier)
        return self.music_handle


@pytest.fixture
def fake_handle():
    """Factory for FakeHandle instances."""
    return FakeHandle


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from memorama.core.events import EventBus
    return EventBus()


@pytest.fixture
def make_audio():
    """Build a loaded AudioManager; returns (manager, provider)."""
    from memorama.audio.manager import AudioManager

    def factory(missing=(), music=True, rng=None):
        provider = FakeProvider(missing=missing, music=music)
        audio = AudioManager(rng=rng)
        audio.load(provider)
        return audio, provider

    return factory


@pytest.fixture
def audio(make_audio):
    """AudioManager with every catalog sound and the music loaded."""
    manager, _ = make_audio()
    return manager
