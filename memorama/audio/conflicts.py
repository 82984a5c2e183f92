"""
Play-state bookkeeping and conflict-group cancellation.
"""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from memorama.audio.backend import SoundHandle

logger = logging.getLogger(__name__)


class PlaybackState:
    """
    Names believed to be actively playing, with the handle playing them.

    An entry exists from the moment safe-play marks it until natural end,
    an explicit stop, a conflict eviction or a rejected play request.
    """

    def __init__(self):
        self._playing: dict[str, SoundHandle] = {}

    def mark(self, name: str, handle: SoundHandle) -> None:
        self._playing[name] = handle

    def get(self, name: str) -> SoundHandle | None:
        return self._playing.get(name)

    def discard(self, name: str, handle: SoundHandle | None = None) -> bool:
        """
        Remove an entry.

        If `handle` is given, the entry is only removed while it still
        belongs to that handle.

        Returns:
            True if an entry was removed
        """
        current = self._playing.get(name)
        if current is None:
            return False
        if handle is not None and current is not handle:
            return False
        del self._playing[name]
        return True

    def items(self) -> list[tuple[str, SoundHandle]]:
        return list(self._playing.items())

    def names(self) -> set[str]:
        return set(self._playing)

    def clear(self) -> None:
        self._playing.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._playing

    def __len__(self) -> int:
        return len(self._playing)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._playing))


def hard_stop(handle: SoundHandle) -> None:
    """Pause and rewind to the start."""
    handle.pause()
    handle.rewind()


class ConflictCoordinator:
    """
    Stops every sound that must not overlap with a newly requested one.

    Conflict groups come from a static table. A name missing from the table
    conflicts only with itself.
    """

    def __init__(self, conflict_groups: Mapping[str, frozenset[str]], state: PlaybackState):
        self._groups = conflict_groups
        self._state = state

    def conflicts_for(self, name: str) -> frozenset[str]:
        return self._groups.get(name, frozenset({name}))

    def stop_conflicting(self, name: str) -> list[str]:
        """
        Hard-stop every playing member of `name`'s conflict group.

        Returns:
            Names that were stopped
        """
        stopped = []
        for conflicting in sorted(self.conflicts_for(name)):
            handle = self._state.get(conflicting)
            if handle is None:
                continue
            hard_stop(handle)
            self._state.discard(conflicting)
            stopped.append(conflicting)
            logger.debug(f"Stopped conflicting sound: '{conflicting}'")
        return stopped
