"""
Event adapter - wires bus events to the AudioManager.

The manager never sees the bus: every inbound event goes through a binding
that pulls the payload out of the Event and calls one manager method, and
the only outbound event (mute changed) is emitted through the manager's
on_mute_changed hook.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from memorama.core.events import AudioEvent, Event, EventBus

if TYPE_CHECKING:
    from memorama.audio.manager import AudioManager

logger = logging.getLogger(__name__)


Binding = Callable[["AudioManager", Event], None]


def _toggle_mute(audio: AudioManager, event: Event) -> None:
    audio.toggle_mute()


def _set_volume(audio: AudioManager, event: Event) -> None:
    audio.set_volume(event.get("volume"))


def _play_sound(audio: AudioManager, event: Event) -> None:
    name = event.get("name")
    try:
        audio.play_sound(name)
    except Exception:
        logger.exception(f"Error in play-sound: {name!r}")


BINDINGS: dict[AudioEvent, Binding] = {
    AudioEvent.TOGGLE_MUTE: _toggle_mute,
    AudioEvent.SET_VOLUME: _set_volume,
    AudioEvent.PLAY_SOUND: _play_sound,
}


class AudioEventAdapter:
    """
    Subscribes an AudioManager to an EventBus.

    Inbound:
        AudioEvent.TOGGLE_MUTE            -> toggle_mute()
        AudioEvent.SET_VOLUME  (volume=)  -> set_volume(volume)
        AudioEvent.PLAY_SOUND  (name=)    -> play_sound(name)

    Outbound:
        AudioEvent.MUTE_CHANGED (muted=)  after every toggle_mute()

    Usage:
        adapter = AudioEventAdapter(audio_manager, event_bus)
        event_bus.publish(AudioEvent.PLAY_SOUND, name="acierto")
    """

    def __init__(self, audio_manager: AudioManager, event_bus: EventBus):
        self.audio = audio_manager
        self.event_bus = event_bus
        self._handlers: dict[AudioEvent, Callable[[Event], None]] = {}

        self._subscribe_events()
        self.audio.on_mute_changed = self._emit_mute_changed

    def _subscribe_events(self) -> None:
        for event_type, binding in BINDINGS.items():
            handler = self._make_handler(binding)
            self._handlers[event_type] = handler
            self.event_bus.subscribe(event_type, handler, weak=False)

    def _make_handler(self, binding: Binding) -> Callable[[Event], None]:
        def handler(event: Event) -> None:
            binding(self.audio, event)
        return handler

    def _emit_mute_changed(self, muted: bool) -> None:
        self.event_bus.publish(AudioEvent.MUTE_CHANGED, muted=muted)

    def detach(self) -> None:
        """Unsubscribe from the bus and stop emitting."""
        for event_type, handler in self._handlers.items():
            self.event_bus.unsubscribe(event_type, handler)
        self._handlers.clear()
        if self.audio.on_mute_changed == self._emit_mute_changed:
            self.audio.on_mute_changed = None

    @property
    def attached(self) -> bool:
        return bool(self._handlers)
