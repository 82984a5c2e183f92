"""
Process-wide audio settings.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from memorama.audio.catalog import MUSIC_ATTENUATION

logger = logging.getLogger(__name__)


def coerce_volume(value: Any) -> float:
    """
    Turn arbitrary input into a volume in [0.0, 1.0].

    Non-numeric input (and NaN) becomes 0.0, everything else is clamped.
    Numbers too large for a float clamp like infinity.
    """
    try:
        volume = float(value)
    except OverflowError:
        volume = 1.0 if value > 0 else 0.0
        logger.warning(f"Volume out of float range, using {volume}")
        return volume
    except (TypeError, ValueError):
        logger.warning(f"Invalid volume {value!r}, using 0.0")
        return 0.0
    if math.isnan(volume):
        logger.warning(f"Invalid volume {value!r}, using 0.0")
        return 0.0
    return max(0.0, min(1.0, volume))


class AudioSettings(BaseModel):
    """
    Global volume and mute state applied to every registered resource.

    Attributes:
        volume: Master volume (0.0 to 1.0)
        muted: Global mute flag
        music_attenuation: Background music volume relative to master
    """

    model_config = ConfigDict(validate_assignment=True)

    volume: float = 1.0
    muted: bool = False
    music_attenuation: float = MUSIC_ATTENUATION

    @field_validator("volume", mode="before")
    @classmethod
    def _clamp_volume(cls, value: Any) -> float:
        return coerce_volume(value)

    @property
    def music_volume(self) -> float:
        """Volume applied to the background music."""
        return self.music_attenuation * self.volume
