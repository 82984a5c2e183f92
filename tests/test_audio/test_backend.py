import pytest
from unittest.mock import MagicMock
from memorama.audio.backend import (
    PendingPlayback,
    PlaybackOutcome,
    PygameAssetProvider,
    PygameMusicHandle,
    PygameSoundHandle,
)
from memorama.audio.errors import PlaybackRejected
from memorama.audio.manager import AudioManager


def test_pending_playback_rejection_callbacks():
    pending = PendingPlayback("acierto")
    errors = []
    pending.on_rejected(errors.append)
    assert not pending.done

    error = PlaybackRejected("acierto", "blocked")
    pending.reject(error)

    assert errors == [error]
    assert pending.outcome is PlaybackOutcome.REJECTED_ASYNC

def test_pending_playback_late_callback_runs_immediately():
    error = PlaybackRejected("acierto")
    pending = PendingPlayback.rejected(error, "acierto")
    errors = []

    pending.on_rejected(errors.append)

    assert errors == [error]

def test_pending_playback_settles_once():
    pending = PendingPlayback.started("acierto")
    errors = []
    pending.on_rejected(errors.append)
    pending.reject(PlaybackRejected("acierto"))

    assert pending.outcome is PlaybackOutcome.STARTED
    assert errors == []

def test_failed_pending_is_sync_rejection():
    pending = PendingPlayback.failed(RuntimeError("x"), "acierto")
    assert pending.outcome is PlaybackOutcome.REJECTED_SYNC
    assert pending.is_rejected

# --- pygame handles ---

@pytest.fixture
def sound():
    return MagicMock()

@pytest.fixture
def channel(sound):
    channel = MagicMock()
    channel.get_sound.return_value = sound
    channel.get_busy.return_value = True
    sound.play.return_value = channel
    return channel

def test_sound_handle_play(sound, channel):
    handle = PygameSoundHandle(sound, name="sonido-acierto")

    pending = handle.play()

    assert pending.outcome is PlaybackOutcome.STARTED
    assert handle.channel is channel

def test_sound_handle_no_free_channel(sound):
    sound.play.return_value = None
    handle = PygameSoundHandle(sound, name="sonido-acierto")

    pending = handle.play()

    assert pending.outcome is PlaybackOutcome.REJECTED_SYNC
    assert isinstance(pending.error, PlaybackRejected)

def test_sound_handle_pause_and_rewind(sound, channel):
    handle = PygameSoundHandle(sound)
    handle.play()

    handle.pause()
    channel.pause.assert_called_once()

    handle.rewind()
    channel.stop.assert_called_once()
    assert handle.channel is None

def test_sound_handle_volume_and_mute(sound):
    handle = PygameSoundHandle(sound)
    handle.volume = 0.4
    sound.set_volume.assert_called_with(0.4)

    handle.muted = True
    sound.set_volume.assert_called_with(0.0)
    assert handle.volume == 0.4

    handle.muted = False
    sound.set_volume.assert_called_with(0.4)

def test_sound_handle_poll_signals_end(sound, channel):
    handle = PygameSoundHandle(sound)
    ended = []
    handle.add_end_listener(lambda: ended.append(True))
    handle.play()

    handle.poll()
    assert ended == []

    channel.get_busy.return_value = False
    handle.poll()
    handle.poll()
    assert ended == [True]

def test_sound_handle_paused_is_not_ended(sound, channel):
    channel.get_busy.return_value = False
    handle = PygameSoundHandle(sound)
    ended = []
    handle.add_end_listener(lambda: ended.append(True))

    handle.play()
    handle.pause()
    handle.poll()

    assert ended == []


class SharedChannel:
    """Stand-in for a pygame Channel that the mixer can reassign."""

    def __init__(self):
        self.sound = None
        self.stop_calls = 0
        self.pause_calls = 0

    def get_sound(self):
        return self.sound

    def get_busy(self):
        return self.sound is not None

    def pause(self):
        self.pause_calls += 1

    def stop(self):
        self.stop_calls += 1
        self.sound = None


def _plays_on(sound, *channels):
    """Make sound.play() take the given channels in order."""
    queue = list(channels)

    def play():
        channel = queue.pop(0)
        channel.sound = sound
        return channel

    sound.play.side_effect = play

def test_reassigned_channel_is_left_alone():
    mine, other = MagicMock(), MagicMock()
    shared = SharedChannel()
    _plays_on(mine, shared)
    handle = PygameSoundHandle(mine)
    handle.play()

    # Finished, then the mixer gives the channel to another sound
    shared.sound = other

    handle.pause()
    handle.rewind()

    assert shared.pause_calls == 0
    assert shared.stop_calls == 0
    assert shared.sound is other
    assert handle.channel is None

def test_reassigned_channel_counts_as_ended():
    mine, other = MagicMock(), MagicMock()
    shared = SharedChannel()
    _plays_on(mine, shared)
    handle = PygameSoundHandle(mine)
    ended = []
    handle.add_end_listener(lambda: ended.append(True))
    handle.play()

    shared.sound = other
    handle.poll()

    assert ended == [True]
    assert handle.channel is None

def test_restart_does_not_cut_off_sound_on_reused_channel():
    acierto_sound, voltear_sound = MagicMock(), MagicMock()
    first, second = SharedChannel(), SharedChannel()
    _plays_on(acierto_sound, first, second)
    _plays_on(voltear_sound, first)

    audio = AudioManager()
    audio.register("acierto", PygameSoundHandle(acierto_sound, name="acierto"))
    audio.register("voltear", PygameSoundHandle(voltear_sound, name="voltear"))

    audio.play_sound("acierto")
    # acierto ends naturally with no update() in between
    first.sound = None
    audio.play_sound("voltear")
    audio.play_sound("acierto")
    audio.update()

    assert first.sound is voltear_sound
    assert first.stop_calls == 0
    assert second.sound is acierto_sound
    assert audio.playing_names() == {"acierto", "voltear"}

    audio.stop_sound("acierto")
    assert first.sound is voltear_sound
    assert audio.playing_names() == {"voltear"}

def test_music_handle_play():
    import pygame
    handle = PygameMusicHandle("assets/musica-fondo.ogg", name="musica-fondo")
    handle.volume = 0.2

    pending = handle.play()

    assert pending.outcome is PlaybackOutcome.STARTED
    pygame.mixer.music.load.assert_called_once_with("assets/musica-fondo.ogg")
    pygame.mixer.music.play.assert_called_once_with(loops=-1)
    pygame.mixer.music.set_volume.assert_called_with(0.2)

def test_music_handle_without_mixer():
    import pygame
    pygame.mixer.get_init.return_value = None
    handle = PygameMusicHandle("assets/musica-fondo.ogg")

    pending = handle.play()

    assert pending.is_rejected
    pygame.mixer.music.load.assert_not_called()

def test_music_handle_load_error():
    import pygame
    pygame.mixer.music.load.side_effect = pygame.error("bad file")
    handle = PygameMusicHandle("assets/missing.ogg", name="musica-fondo")

    pending = handle.play()

    assert pending.is_rejected
    assert "bad file" in str(pending.error)

def test_music_handle_stop():
    import pygame
    handle = PygameMusicHandle("assets/musica-fondo.ogg")
    handle.play()

    handle.pause()
    handle.rewind()

    pygame.mixer.music.pause.assert_called_once()
    pygame.mixer.music.stop.assert_called_once()

# --- asset provider ---

def test_provider_loads_existing_file(tmp_path):
    import pygame
    path = tmp_path / "sonido-acierto.wav"
    path.write_bytes(b"RIFF")
    provider = PygameAssetProvider(tmp_path)

    handle = provider.get_handle("sonido-acierto")

    assert isinstance(handle, PygameSoundHandle)
    pygame.mixer.Sound.assert_called_once_with(str(path))

def test_provider_prefers_first_extension(tmp_path):
    (tmp_path / "sonido-inicio.ogg").write_bytes(b"OggS")
    (tmp_path / "sonido-inicio.mp3").write_bytes(b"ID3")
    provider = PygameAssetProvider(tmp_path)

    assert provider.find("sonido-inicio") == tmp_path / "sonido-inicio.ogg"

def test_provider_missing_file(tmp_path):
    provider = PygameAssetProvider(tmp_path)
    assert provider.get_handle("sonido-acierto") is None
    assert provider.get_music_handle("musica-fondo") is None

def test_provider_decode_error(tmp_path):
    import pygame
    (tmp_path / "sonido-error1.ogg").write_bytes(b"garbage")
    pygame.mixer.Sound.side_effect = pygame.error("Unrecognized audio format")
    provider = PygameAssetProvider(tmp_path)

    assert provider.get_handle("sonido-error1") is None

def test_provider_music_handle(tmp_path):
    (tmp_path / "musica-fondo.mp3").write_bytes(b"ID3")
    provider = PygameAssetProvider(tmp_path)

    handle = provider.get_music_handle("musica-fondo")

    assert isinstance(handle, PygameMusicHandle)
    assert handle.track_path == str(tmp_path / "musica-fondo.mp3")
