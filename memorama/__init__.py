"""
Memorama

Audio coordinator for a card-matching memory game: logical sound names,
random variants, non-overlapping playback and global mute/volume, driven
by a typed event bus.

Quick Start:
    from memorama import AudioManager, AudioEventAdapter, EventBus, AudioEvent
    from memorama.audio import PygameAssetProvider

    bus = EventBus()
    audio = AudioManager()
    audio.init()
    audio.load(PygameAssetProvider("assets/audio"))
    AudioEventAdapter(audio, bus)

    bus.publish(AudioEvent.PLAY_SOUND, name="victoria")
"""

__version__ = "0.1.0"
__author__ = "Developer"

from memorama.core import EventBus, Event, AudioEvent
from memorama.audio import AudioManager, AudioEventAdapter

__all__ = [
    # Events
    "EventBus",
    "Event",
    "AudioEvent",
    # Audio
    "AudioManager",
    "AudioEventAdapter",
]
