"""
Core Audio Manager.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable

import pygame

from memorama.audio.backend import AssetProvider, PendingPlayback, SoundHandle
from memorama.audio.catalog import DEFAULT_CATALOG, SoundCatalog
from memorama.audio.conflicts import ConflictCoordinator, PlaybackState, hard_stop
from memorama.audio.registry import ResourceRegistry
from memorama.audio.settings import AudioSettings
from memorama.audio.variants import VariantResolver

logger = logging.getLogger(__name__)

MuteListener = Callable[[bool], None]


class AudioManager:
    """
    Central audio coordinator for the game.

    Handles:
    - Safe playback of logical sound names (variants resolved at random)
    - Stopping conflicting sounds before a new one starts
    - Tracking which sounds are currently playing
    - Global mute and volume, applied to every resource
    - Background music on/off

    No public method raises: missing sounds, rejected playback and bad input
    are logged and ignored.

    Usage:
        audio = AudioManager()
        audio.init()
        audio.load(PygameAssetProvider("assets/audio"))
        audio.play_sound("victoria")

        # once per frame
        audio.update(dt)
    """

    def __init__(
        self,
        catalog: SoundCatalog = DEFAULT_CATALOG,
        rng: random.Random | None = None,
        on_mute_changed: MuteListener | None = None,
    ):
        self.catalog = catalog
        self.on_mute_changed = on_mute_changed

        self.settings = AudioSettings(music_attenuation=catalog.music_attenuation)
        self.registry = ResourceRegistry(self.settings)
        self.state = PlaybackState()
        self.variants = VariantResolver(catalog.variant_groups, self.registry, rng=rng)
        self.conflicts = ConflictCoordinator(catalog.conflict_groups, self.state)

        self._end_listeners: dict[str, Callable[[], None]] = {}
        self._initialized: bool = False

    # --- Lifecycle ---

    def init(self, frequency: int = 44100, size: int = -16, channels: int = 2, buffer: int = 512) -> None:
        """Initialize the pygame mixer."""
        if pygame.mixer.get_init():
            self._initialized = True
            return

        try:
            pygame.mixer.init(frequency=frequency, size=size, channels=channels, buffer=buffer)
            pygame.mixer.set_num_channels(32)
            self._initialized = True
            logger.info("Audio system initialized.")
        except pygame.error as e:
            logger.error(f"Failed to initialize audio system: {e}")

    def quit(self) -> None:
        """Shutdown the mixer."""
        self.shutdown()
        pygame.mixer.quit()
        self._initialized = False

    def load(self, provider: AssetProvider) -> None:
        """
        Probe the provider for every catalog sound and the background music.

        Missing assets are skipped; those names stay unavailable for the
        lifetime of the manager.
        """
        logger.info("Initializing sounds...")
        for name in self.catalog.sound_names:
            self.register(name, provider.get_handle(self.catalog.element_id(name)))

        self.registry.register_music(provider.get_music_handle(self.catalog.music_id))
        logger.info(f"Available sounds: {sorted(self.registry.names())}")

    def register(self, name: str, handle: SoundHandle | None) -> bool:
        """Register a sound and hook its end-of-playback signal."""
        if not self.registry.register(name, handle):
            return False

        def on_ended() -> None:
            self._on_sound_ended(name, handle)

        handle.add_end_listener(on_ended)
        self._end_listeners[name] = on_ended
        return True

    def update(self, dt: float = 0.0) -> None:
        """Poll handles so end-of-playback callbacks run on the game loop."""
        for handle in self.registry.handles():
            handle.poll()
        if self.registry.music is not None:
            self.registry.music.poll()

    def shutdown(self) -> None:
        """Stop everything and release all resources."""
        self.stop_all_sounds()
        self.toggle_music(False)
        for name, listener in self._end_listeners.items():
            handle = self.registry.get(name)
            if handle is not None:
                handle.remove_end_listener(listener)
        self._end_listeners.clear()
        self.registry.clear()

    # --- Playback ---

    def play_sound(self, name: str) -> None:
        """
        Play a sound by logical name, stopping anything it conflicts with.

        Group names ("victoria", "error") play one of their registered
        variants; any other name is looked up directly.
        """
        if self.settings.muted:
            logger.debug(f"Muted, skipping: {name}")
            return
        if not name:
            logger.warning("Empty sound name")
            return

        logger.debug(f"Requested sound: '{name}'")
        self.conflicts.stop_conflicting(name)

        target_name = self.variants.resolve(name)
        if target_name is None:
            target_name = name

        handle = self.registry.get(target_name)
        if handle is None:
            logger.warning(f"Sound not found: '{name}'")
            return

        self._play_safe(handle, target_name)

    def _play_safe(self, handle: SoundHandle, key: str) -> PendingPlayback:
        """
        Restart `handle` from zero and track it under `key`.

        The key is marked before play() so a failure, sync or async, can
        always find and clear it.
        """
        try:
            hard_stop(handle)
            self.state.mark(key, handle)

            pending = handle.play()
            pending.on_rejected(lambda error: self._on_play_rejected(key, handle, error))
        except Exception as e:
            logger.warning(f"Exception playing '{key}': {e}")
            self.state.discard(key, handle)
            return PendingPlayback.failed(e, key)

        if not pending.is_rejected:
            logger.debug(f"Playing: '{key}'")
        return pending

    def _on_play_rejected(self, key: str, handle: SoundHandle, error: BaseException) -> None:
        logger.warning(f"Error playing '{key}': {error}")
        self.state.discard(key, handle)

    def _on_sound_ended(self, name: str, handle: SoundHandle) -> None:
        if self.state.discard(name, handle):
            logger.debug(f"Sound finished: '{name}'")

    def stop_all_sounds(self) -> None:
        """Stop every tracked sound, regardless of mute state."""
        logger.debug("Stopping all sounds...")
        for _, handle in self.state.items():
            hard_stop(handle)
        self.state.clear()

    def stop_sound(self, name: str) -> None:
        """Stop one sound if it is playing."""
        handle = self.state.get(name)
        if handle is None:
            return
        hard_stop(handle)
        self.state.discard(name)
        logger.debug(f"Sound stopped: '{name}'")

    def is_playing(self, name: str) -> bool:
        return name in self.state

    def playing_names(self) -> set[str]:
        return self.state.names()

    # --- Music ---

    def toggle_music(self, play: bool = True) -> None:
        """Start the background music from the top, or stop it."""
        music = self.registry.music
        if music is None:
            return

        if play:
            try:
                music.rewind()
                music.play().on_rejected(lambda error: logger.warning(f"Music error: {error}"))
            except Exception as e:
                logger.warning(f"Music error: {e}")
        else:
            hard_stop(music)

    # --- Mute / Volume ---

    def toggle_mute(self) -> None:
        """Flip the global mute flag and apply it everywhere."""
        muted = not self.settings.muted
        self.settings.muted = muted
        for handle in self.registry.handles():
            handle.muted = muted
        if self.registry.music is not None:
            self.registry.music.muted = muted

        if self.on_mute_changed is not None:
            self.on_mute_changed(muted)
        logger.info(f"Mute = {muted}")

    def set_volume(self, volume: Any) -> None:
        """Set master volume; anything non-numeric counts as 0."""
        self.settings.volume = volume
        for handle in self.registry.handles():
            handle.volume = self.settings.volume
        if self.registry.music is not None:
            self.registry.music.volume = self.settings.music_volume
        logger.info(f"Volume = {self.settings.volume}")

    def get_mute_status(self) -> bool:
        return self.settings.muted

    def get_volume(self) -> float:
        return self.settings.volume
