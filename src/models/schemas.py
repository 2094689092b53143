from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Region(BaseModel):
    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float


class PlaceRecord(BaseModel):
    coordinate: Coordinate | None = None
    title: str = ""
    address: str | None = None
    rating: float | None = None
    review_count: int | None = None
    image_ref: str | None = None


class PointOfInterest(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    coordinate: Coordinate
    title: str
    address: str | None = None
    rating: float | None = None
    review_count: int | None = None
    image_ref: str | None = None


class PlacesSearchRequest(BaseModel):
    latitude: float
    longitude: float
    radius_m: int = Field(default=1000, gt=0)
    keyword: str = "toilet"


class PlacesSearchResponse(BaseModel):
    records: list[PlaceRecord]


class VisibilityState(str, Enum):
    SHOWN = "shown"
    HIDDEN = "hidden"


class RecenterCommand(BaseModel):
    kind: str = "recenter"
    index: int
    coordinate: Coordinate
    latitude_delta: float
    longitude_delta: float
    duration_ms: int


class ScrollToCommand(BaseModel):
    kind: str = "scroll_to"
    index: int
    offset_x: float
    animated: bool = True


class TrayAnimationCommand(BaseModel):
    kind: str = "tray_animation"
    state: VisibilityState
    to_offset: float
    duration_ms: int


class MarkerScales(BaseModel):
    kind: str = "marker_scales"
    scales: list[float]


class ScrollState(BaseModel):
    raw_offset: float = 0.0
    active_index: int | None = None
    pending_index: int | None = None


class ScreenSnapshot(BaseModel):
    session_id: str
    generation: int
    point_count: int
    scroll: ScrollState
    visibility: VisibilityState
    visibility_progress: float
    closed: bool = False
