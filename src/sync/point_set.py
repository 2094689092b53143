import logging
from typing import Callable, Iterable, Iterator, List, Optional

from models.schemas import PlaceRecord, PointOfInterest

logger = logging.getLogger(__name__)

ReplaceListener = Callable[[int], None]


class PointSet:
    """
    Ordered points of interest for one search generation.

    Indices are only meaningful within a single generation: every call to
    replace_all swaps the whole list and bumps the generation counter.
    """

    def __init__(self) -> None:
        self._points: List[PointOfInterest] = []
        self._generation = 0
        self._listeners: List[ReplaceListener] = []

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PointOfInterest]:
        return iter(list(self._points))

    def get(self, index: int) -> Optional[PointOfInterest]:
        if 0 <= index < len(self._points):
            return self._points[index]
        return None

    def on_replace(self, listener: ReplaceListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def replace_all(self, records: Iterable[PlaceRecord]) -> List[PointOfInterest]:
        points: List[PointOfInterest] = []
        skipped = 0
        for record in records:
            if record.coordinate is None:
                skipped += 1
                continue
            points.append(
                PointOfInterest(
                    id=len(points),
                    coordinate=record.coordinate,
                    title=record.title,
                    address=record.address,
                    rating=record.rating,
                    review_count=record.review_count,
                    image_ref=record.image_ref,
                )
            )
        if skipped:
            logger.debug("Skipped %d place records without a coordinate", skipped)

        self._points = points
        self._generation += 1
        for listener in list(self._listeners):
            listener(self._generation)
        return list(points)

    def clear(self) -> None:
        self.replace_all([])
