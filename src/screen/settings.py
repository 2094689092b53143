from __future__ import annotations

import os
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from models.schemas import Region


class Platform(str, Enum):
    IOS = "ios"
    ANDROID = "android"


class SyncSettings(BaseModel):
    """
    Tunables for the map/tray synchronization. Bias and debounce are
    display-dependent, so they are configurable rather than fixed.
    """

    item_width: float = Field(default=300.0, gt=0)
    item_spacing: float = Field(default=20.0, ge=0)
    bias_fraction: float = Field(default=0.3, ge=0, lt=1)
    debounce_ms: float = Field(default=10.0, ge=0)
    recenter_duration_ms: int = Field(default=350, ge=0)
    toggle_duration_ms: int = Field(default=500, ge=0)
    platform: Platform = Platform.ANDROID
    leading_inset: float = 0.0
    tray_height: float = Field(default=220.0, ge=0)
    tray_margin: float = Field(default=10.0, ge=0)
    peak_scale: float = Field(default=1.5, ge=1.0)
    search_radius_m: int = Field(default=1000, gt=0)
    places_api_key: Optional[str] = None
    initial_region: Region = Region(
        latitude=37.7749,
        longitude=-122.4194,
        latitude_delta=0.0922,
        longitude_delta=0.0421,
    )

    @property
    def inset_for_leading_edge(self) -> float:
        # Only iOS reports scroll offsets relative to the content inset.
        return self.leading_inset if self.platform == Platform.IOS else 0.0

    @property
    def hidden_tray_offset(self) -> float:
        return self.tray_height + self.tray_margin

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "SyncSettings":
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        mapping = {
            "MAP_ITEM_WIDTH": "item_width",
            "MAP_ITEM_SPACING": "item_spacing",
            "MAP_BIAS_FRACTION": "bias_fraction",
            "MAP_DEBOUNCE_MS": "debounce_ms",
            "MAP_RECENTER_DURATION_MS": "recenter_duration_ms",
            "MAP_TOGGLE_DURATION_MS": "toggle_duration_ms",
            "MAP_PLATFORM": "platform",
            "MAP_LEADING_INSET": "leading_inset",
            "MAP_TRAY_HEIGHT": "tray_height",
            "MAP_TRAY_MARGIN": "tray_margin",
            "MAP_PEAK_SCALE": "peak_scale",
            "MAP_SEARCH_RADIUS_M": "search_radius_m",
            "GOOGLE_PLACES_API_KEY": "places_api_key",
        }
        for env_key, field_name in mapping.items():
            raw = env.get(env_key)
            if raw not in (None, ""):
                values[field_name] = raw

        region_keys = ("latitude", "longitude", "latitude_delta", "longitude_delta")
        region_env = {key: env.get(f"MAP_INITIAL_{key.upper()}") for key in region_keys}
        if any(region_env.values()):
            region = cls.model_fields["initial_region"].default.model_dump()
            region.update({k: v for k, v in region_env.items() if v not in (None, "")})
            values["initial_region"] = region

        return cls(**values)
