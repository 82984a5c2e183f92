"""
Audio subsystem.

- AudioManager: playback coordinator (variants, conflicts, mute/volume)
- AudioEventAdapter: routes bus events to the manager
- PygameAssetProvider: loads handles from an asset directory
"""

from memorama.audio.adapter import AudioEventAdapter
from memorama.audio.backend import (
    AssetProvider,
    PendingPlayback,
    PlaybackOutcome,
    PygameAssetProvider,
    PygameMusicHandle,
    PygameSoundHandle,
    SoundHandle,
)
from memorama.audio.catalog import DEFAULT_CATALOG, SoundCatalog
from memorama.audio.conflicts import ConflictCoordinator, PlaybackState
from memorama.audio.errors import AudioError, PlaybackRejected
from memorama.audio.manager import AudioManager
from memorama.audio.registry import ResourceRegistry
from memorama.audio.settings import AudioSettings
from memorama.audio.variants import VariantResolver

__all__ = [
    "AudioManager",
    "AudioEventAdapter",
    "AssetProvider",
    "PygameAssetProvider",
    "SoundHandle",
    "PygameSoundHandle",
    "PygameMusicHandle",
    "PendingPlayback",
    "PlaybackOutcome",
    "SoundCatalog",
    "DEFAULT_CATALOG",
    "AudioSettings",
    "ResourceRegistry",
    "VariantResolver",
    "ConflictCoordinator",
    "PlaybackState",
    "AudioError",
    "PlaybackRejected",
]
