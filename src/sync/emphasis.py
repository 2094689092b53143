from typing import List

from models.schemas import VisibilityState

BASE_SCALE = 1.0


def emphasis_scale(raw_offset: float, index: int, item_width: float, peak_scale: float = 1.5) -> float:
    """
    Scale for marker `index` at the given tray offset.

    Breakpoints (i-1)*W, i*W, (i+1)*W map to 1.0, peak, 1.0 with linear
    interpolation in between and clamping outside.
    """
    center = index * item_width
    distance = abs(raw_offset - center)
    if distance >= item_width:
        return BASE_SCALE
    return peak_scale - (peak_scale - BASE_SCALE) * (distance / item_width)


class MarkerEmphasisInterpolator:
    def __init__(self, item_width: float, peak_scale: float = 1.5):
        if item_width <= 0:
            raise ValueError("item_width must be positive")
        self.item_width = item_width
        self.peak_scale = peak_scale

    def scale_for(self, raw_offset: float, index: int, visibility: VisibilityState = VisibilityState.SHOWN) -> float:
        if visibility != VisibilityState.SHOWN:
            return BASE_SCALE
        return emphasis_scale(raw_offset, index, self.item_width, self.peak_scale)

    def scales(
        self, raw_offset: float, count: int, visibility: VisibilityState = VisibilityState.SHOWN
    ) -> List[float]:
        return [self.scale_for(raw_offset, index, visibility) for index in range(count)]
