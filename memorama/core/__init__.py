"""
Core engine module.

Exports:
- EventBus, Event: Event system
- AudioEvent: Events understood by the audio subsystem
"""

from memorama.core.events import EventBus, Event, EventHandler, AudioEvent

__all__ = [
    "EventBus",
    "Event",
    "EventHandler",
    "AudioEvent",
]
