"""
Typed event bus for the game loop.

Events are Enum members so handlers never subscribe to a misspelled string.
The audio events keep the wire names the UI layer already emits
("play-sound", "toggle-mute", ...) as their values.

Usage:
    bus = EventBus()
    bus.subscribe(AudioEvent.PLAY_SOUND, on_play_sound)
    bus.publish(AudioEvent.PLAY_SOUND, name="acierto")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class AudioEvent(Enum):
    """Events exchanged between the UI and the audio subsystem."""
    # Inbound
    TOGGLE_MUTE = "toggle-mute"
    SET_VOLUME = "set-volume"
    PLAY_SOUND = "play-sound"

    # Outbound
    MUTE_CHANGED = "mute-changed"


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Event payload as keyword data
        consumed: Whether a handler stopped propagation
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Stop propagation to lower-priority handlers."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Publish/subscribe hub.

    Handlers run synchronously inside publish(), highest priority first.
    Events published while a dispatch is in progress are queued and
    delivered after it finishes, so every handler runs serialized on the
    publishing thread.
    """

    def __init__(self):
        # event type -> [(priority, handler or weak ref, one_shot)]
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first
            one_shot: Remove the handler after its first call
            weak: Hold the handler by weak reference
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, "__self__") else ref(handler)
        else:
            handler_ref = handler

        handlers = self._handlers.setdefault(event_type, [])
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break
        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if event_type not in self._handlers:
            return
        self._handlers[event_type] = [
            entry for entry in self._handlers[event_type]
            if self._get_handler(entry[1]) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)
        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop all handlers, or only those of one event type."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return len(self._handlers.get(event_type, []))

    def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if not handlers:
            self._drain_queue()
            return

        self._is_publishing = True
        # Handlers subscribed during dispatch wait for the next event
        to_remove: list[tuple[int, Any, bool]] = []
        try:
            for entry in list(handlers):
                _, handler_ref, one_shot = entry
                handler = self._get_handler(handler_ref)
                if handler is None:
                    # Collected weak reference
                    to_remove.append(entry)
                    continue

                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error in event handler for {event.type}")

                if one_shot:
                    to_remove.append(entry)
                if event.consumed:
                    break
        finally:
            self._remove_entries(event.type, to_remove)
            self._is_publishing = False

        self._drain_queue()

    def _remove_entries(self, event_type: Enum, entries: list[tuple[int, Any, bool]]) -> None:
        current = self._handlers.get(event_type)
        if not entries or not current:
            return
        self._handlers[event_type] = [
            entry for entry in current
            if not any(entry is removed for removed in entries)
        ]

    def _drain_queue(self) -> None:
        while self._event_queue and not self._is_publishing:
            self._dispatch(self._event_queue.pop(0))

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
