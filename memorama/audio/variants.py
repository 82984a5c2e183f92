"""
Random selection among interchangeable sounds.
"""

from __future__ import annotations

import logging
import random
from typing import Mapping

from memorama.audio.registry import ResourceRegistry

logger = logging.getLogger(__name__)


class VariantResolver:
    """
    Maps a group name ("victoria", "error") to one of its registered members.

    The member list is filtered against the registry on every call, so a
    group works with whichever variants actually loaded.
    """

    def __init__(
        self,
        variant_groups: Mapping[str, tuple[str, ...]],
        registry: ResourceRegistry,
        rng: random.Random | None = None,
    ):
        self._groups = variant_groups
        self._registry = registry
        # The random module itself exposes choice(); it is the process-wide default.
        self._rng = rng if rng is not None else random

    def is_group(self, name: str) -> bool:
        return name in self._groups

    def resolve(self, requested_name: str) -> str | None:
        """
        Pick a concrete resource name for a group.

        Returns:
            The chosen member, or None if the name is not a group or no
            member is registered.
        """
        members = self._groups.get(requested_name)
        if members is None:
            return None

        available = [member for member in members if member in self._registry]
        if not available:
            logger.warning(f"No variants available for: '{requested_name}'")
            return None

        chosen = self._rng.choice(available)
        logger.debug(f"Using variant '{chosen}' for '{requested_name}'")
        return chosen
