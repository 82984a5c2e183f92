"""
Registry of loaded sound resources.
"""

from __future__ import annotations

import logging
from typing import Iterator

from memorama.audio.backend import SoundHandle
from memorama.audio.settings import AudioSettings

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """
    Owns every playable handle, keyed by logical sound name, plus the single
    background-music handle.

    Names are fixed once loading is done: there is no runtime removal and a
    name cannot be registered twice. Current settings are applied to each
    handle as it comes in.
    """

    def __init__(self, settings: AudioSettings):
        self._settings = settings
        self._sounds: dict[str, SoundHandle] = {}
        self._music: SoundHandle | None = None

    def register(self, name: str, handle: SoundHandle | None) -> bool:
        """
        Record a handle under a logical name.

        Returns:
            True if the handle was registered
        """
        if handle is None:
            logger.warning(f"Audio not found: {name}")
            return False
        if name in self._sounds:
            logger.warning(f"Audio already registered, ignoring: {name}")
            return False

        handle.volume = self._settings.volume
        handle.muted = self._settings.muted
        self._sounds[name] = handle
        logger.info(f"Audio registered: {name}")
        return True

    def register_music(self, handle: SoundHandle | None) -> bool:
        """Record the background-music handle, attenuated against master volume."""
        if handle is None:
            logger.warning("Background music not found")
            return False
        if self._music is not None:
            logger.warning("Background music already registered, ignoring")
            return False

        handle.muted = self._settings.muted
        handle.volume = self._settings.music_volume
        self._music = handle
        logger.info("Background music registered")
        return True

    def get(self, name: str) -> SoundHandle | None:
        return self._sounds.get(name)

    @property
    def music(self) -> SoundHandle | None:
        return self._music

    def names(self) -> set[str]:
        return set(self._sounds)

    def handles(self) -> Iterator[SoundHandle]:
        return iter(list(self._sounds.values()))

    def clear(self) -> None:
        """Release every handle (process teardown)."""
        self._sounds.clear()
        self._music = None

    def __contains__(self, name: object) -> bool:
        return name in self._sounds

    def __len__(self) -> int:
        return len(self._sounds)
