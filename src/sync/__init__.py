from .point_set import PointSet
from .events import OffsetStream, dispatch
from .scroll_sync import ScrollToMapSync
from .emphasis import MarkerEmphasisInterpolator, emphasis_scale
from .visibility import VisibilityToggle

__all__ = [
    "PointSet",
    "OffsetStream",
    "dispatch",
    "ScrollToMapSync",
    "MarkerEmphasisInterpolator",
    "emphasis_scale",
    "VisibilityToggle",
]
