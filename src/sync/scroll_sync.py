import asyncio
import logging
import math
from typing import Any, Callable, Optional, Protocol

from models.schemas import RecenterCommand, Region, ScrollState, ScrollToCommand
from sync.events import Collaborator, dispatch
from sync.point_set import PointSet

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class ScrollToMapSync:
    """
    Turns the tray's continuous scroll offset into debounced camera recenter
    commands, and marker taps into immediate tray scroll-to commands.

    At most one debounce timer is pending at any time; every offset update
    cancels it and starts a new one.
    Without an explicit scheduler, offset updates must arrive on a running
    asyncio loop.
    """

    def __init__(
        self,
        points: PointSet,
        *,
        item_width: float,
        item_spacing: float = 20.0,
        bias_fraction: float = 0.3,
        debounce_ms: float = 10.0,
        recenter_duration_ms: int = 350,
        leading_inset: float = 0.0,
        region_provider: Callable[[], Region],
        on_recenter: Optional[Collaborator] = None,
        on_scroll_to: Optional[Collaborator] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        if item_width <= 0:
            raise ValueError("item_width must be positive")
        self.points = points
        self.item_width = item_width
        self.item_spacing = item_spacing
        self.bias_fraction = bias_fraction
        self.debounce_ms = debounce_ms
        self.recenter_duration_ms = recenter_duration_ms
        self.leading_inset = leading_inset
        self.region_provider = region_provider
        self.on_recenter = on_recenter
        self.on_scroll_to = on_scroll_to
        self._scheduler = scheduler

        self.raw_offset = 0.0
        self.active_index = 0
        self.pending_index: Optional[int] = None
        self._pending_generation: Optional[int] = None
        self._timer: Optional[TimerHandle] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def candidate_index(self, raw_offset: float) -> Optional[int]:
        count = len(self.points)
        if count == 0:
            return None
        index = math.floor(raw_offset / self.item_width + self.bias_fraction)
        return max(0, min(index, count - 1))

    def on_offset_changed(self, raw_offset: float) -> None:
        if self._closed:
            return
        self.raw_offset = raw_offset
        index = self.candidate_index(raw_offset)
        if index is None:
            return
        self.pending_index = index
        self._pending_generation = self.points.generation
        self._restart_timer()

    def on_marker_selected(self, index: int) -> Optional[ScrollToCommand]:
        if self._closed:
            return None
        if self.points.get(index) is None:
            logger.debug("Dropping scroll-to for index %s outside %d points", index, len(self.points))
            return None
        offset_x = index * self.item_width + index * self.item_spacing - self.leading_inset
        command = ScrollToCommand(index=index, offset_x=offset_x)
        dispatch(self.on_scroll_to, command)
        return command

    def reset(self, generation: Optional[int] = None) -> None:
        """Discard index state that belongs to a previous point generation."""
        if self.pending_index is not None or self.active_index:
            logger.debug(
                "Discarding active %s / pending %s for new generation %s",
                self.active_index,
                self.pending_index,
                generation,
            )
        self._cancel_timer()
        self.pending_index = None
        self._pending_generation = None
        self.active_index = 0

    def close(self) -> None:
        self._cancel_timer()
        self.pending_index = None
        self._closed = True

    def state(self) -> ScrollState:
        return ScrollState(
            raw_offset=self.raw_offset,
            active_index=self.active_index if len(self.points) else None,
            pending_index=self.pending_index,
        )

    def _restart_timer(self) -> None:
        self._cancel_timer()
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._timer = scheduler.call_later(self.debounce_ms / 1000.0, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        index = self.pending_index
        generation = self._pending_generation
        self.pending_index = None
        self._pending_generation = None
        if self._closed or index is None:
            return
        if generation != self.points.generation:
            logger.debug("Dropping recenter to index %s from generation %s", index, generation)
            return
        point = self.points.get(index)
        if point is None:
            logger.debug("Dropping recenter to stale index %s", index)
            return
        if index == self.active_index:
            return

        self.active_index = index
        region = self.region_provider()
        dispatch(
            self.on_recenter,
            RecenterCommand(
                index=index,
                coordinate=point.coordinate,
                latitude_delta=region.latitude_delta,
                longitude_delta=region.longitude_delta,
                duration_ms=self.recenter_duration_ms,
            ),
        )
