"""
Static sound catalog for the memory game.

Everything here is compiled-in configuration: the logical sound names the
game knows about, how they map to asset identifiers, the interchangeable
variant groups and the conflict groups that must never overlap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


MUSIC_ATTENUATION = 0.2

SOUND_NAMES: tuple[str, ...] = (
    # Basic cues
    "inicio",
    "acierto",
    "voltear",
    "victoria-nivel",
    # Victory variants
    "victoria1",
    "victoria2",
    "victoria3",
    # Error variants
    "error1",
    "error2",
    "error3",
)

VARIANT_GROUPS: dict[str, tuple[str, ...]] = {
    "victoria": ("victoria1", "victoria2", "victoria3"),
    "error": ("error1", "error2", "error3"),
}

# Hand-maintained: "victoria" and "victoria-nivel" share a superset on purpose.
# Adding an alias means adding its own row here.
CONFLICT_GROUPS: dict[str, frozenset[str]] = {
    "victoria": frozenset({"victoria1", "victoria2", "victoria3", "victoria-nivel"}),
    "error": frozenset({"error1", "error2", "error3"}),
    "acierto": frozenset({"acierto"}),
    "victoria-nivel": frozenset({"victoria1", "victoria2", "victoria3", "victoria-nivel"}),
}


@dataclass(frozen=True)
class SoundCatalog:
    """
    Immutable audio configuration.

    Attributes:
        sound_names: Logical names probed at startup
        music_id: Asset identifier of the background track
        element_prefix: Prefix used to derive a sound's asset identifier
        variant_groups: Group name -> interchangeable member names
        conflict_groups: Trigger name -> names halted when it fires
        music_attenuation: Music volume relative to the global volume
    """
    sound_names: tuple[str, ...] = SOUND_NAMES
    music_id: str = "musica-fondo"
    element_prefix: str = "sonido-"
    variant_groups: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: dict(VARIANT_GROUPS))
    conflict_groups: Mapping[str, frozenset[str]] = field(default_factory=lambda: dict(CONFLICT_GROUPS))
    music_attenuation: float = MUSIC_ATTENUATION

    def __post_init__(self) -> None:
        object.__setattr__(self, "sound_names", tuple(self.sound_names))
        object.__setattr__(self, "variant_groups", MappingProxyType(
            {name: tuple(members) for name, members in self.variant_groups.items()}
        ))
        object.__setattr__(self, "conflict_groups", MappingProxyType(
            {name: frozenset(members) for name, members in self.conflict_groups.items()}
        ))

    def element_id(self, name: str) -> str:
        """Asset identifier for a logical sound name."""
        return f"{self.element_prefix}{name}"


DEFAULT_CATALOG = SoundCatalog()
