import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from models.schemas import (
    MarkerScales,
    PlaceRecord,
    PlacesSearchRequest,
    PointOfInterest,
    Region,
    ScreenSnapshot,
)
from screen.logger import log_event
from screen.settings import SyncSettings
from sync import MarkerEmphasisInterpolator, OffsetStream, PointSet, ScrollToMapSync, VisibilityToggle
from sync.events import Collaborator, dispatch
from sync.scroll_sync import Scheduler
from tools.places import search_places

logger = logging.getLogger(__name__)

CommandListener = Callable[[Dict[str, Any]], Any]


class MapScreen:
    """
    One map screen session: owns the points, the sync engine, the emphasis
    interpolator and the tray toggle, and routes their commands to the
    camera, tray and marker-renderer collaborators.
    """

    def __init__(
        self,
        session_id: str,
        settings: Optional[SyncSettings] = None,
        *,
        on_recenter: Optional[Collaborator] = None,
        on_scroll_to: Optional[Collaborator] = None,
        on_marker_scales: Optional[Collaborator] = None,
        on_tray_animation: Optional[Collaborator] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        record_events: bool = True,
    ):
        self.session_id = session_id
        self.settings = settings or SyncSettings()
        self.region: Region = self.settings.initial_region
        self.record_events = record_events
        self._collaborators: Dict[str, Optional[Collaborator]] = {
            "recenter": on_recenter,
            "scroll_to": on_scroll_to,
            "marker_scales": on_marker_scales,
            "tray_animation": on_tray_animation,
        }
        self._listeners: List[CommandListener] = []
        self._closed = False

        if scheduler is None:
            try:
                scheduler = asyncio.get_running_loop()
            except RuntimeError as exc:
                raise RuntimeError("MapScreen needs a running event loop or an explicit scheduler") from exc

        self.points = PointSet()
        self.offsets = OffsetStream()
        self.sync = ScrollToMapSync(
            self.points,
            item_width=self.settings.item_width,
            item_spacing=self.settings.item_spacing,
            bias_fraction=self.settings.bias_fraction,
            debounce_ms=self.settings.debounce_ms,
            recenter_duration_ms=self.settings.recenter_duration_ms,
            leading_inset=self.settings.inset_for_leading_edge,
            region_provider=lambda: self.region,
            on_recenter=lambda cmd: self._emit("recenter", cmd),
            on_scroll_to=lambda cmd: self._emit("scroll_to", cmd),
            scheduler=scheduler,
        )
        self.emphasis = MarkerEmphasisInterpolator(self.settings.item_width, self.settings.peak_scale)
        toggle_kwargs: Dict[str, Any] = {"on_animate": lambda cmd: self._emit("tray_animation", cmd)}
        if clock is not None:
            toggle_kwargs["clock"] = clock
        self.visibility = VisibilityToggle(
            self.settings.hidden_tray_offset, self.settings.toggle_duration_ms, **toggle_kwargs
        )

        self._detach: List[Callable[[], None]] = [
            self.points.on_replace(self.sync.reset),
            self.offsets.subscribe(self.sync.on_offset_changed),
            self.offsets.subscribe(self._publish_scales),
        ]

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: CommandListener) -> Callable[[], None]:
        """Observe every emitted command as a plain dict."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    async def load_places(self, req: Optional[PlacesSearchRequest] = None) -> List[PointOfInterest]:
        req = req or PlacesSearchRequest(
            latitude=self.region.latitude,
            longitude=self.region.longitude,
            radius_m=self.settings.search_radius_m,
        )
        response = await search_places(req, api_key=self.settings.places_api_key)
        if self._closed:
            # Results arriving after teardown belong to nobody.
            return []
        return self.replace_points(response.records)

    def replace_points(self, records: Iterable[PlaceRecord]) -> List[PointOfInterest]:
        if self._closed:
            return []
        records = list(records)
        points = self.points.replace_all(records)
        logger.info(
            "Session %s loaded %d points (%d records, generation %d)",
            self.session_id,
            len(points),
            len(records),
            self.points.generation,
        )
        self._record("points_replaced", {"generation": self.points.generation, "count": len(points)})
        self._publish_scales(self.offsets.last_offset)
        return points

    def scroll(self, offset: float) -> None:
        self.offsets.emit(offset)

    def marker_pressed(self, index: int) -> None:
        if self._closed:
            return
        self.sync.on_marker_selected(index)

    def background_pressed(self) -> None:
        if self._closed:
            return
        self.visibility.toggle()
        self._publish_scales(self.offsets.last_offset)

    def update_region(self, region: Region) -> None:
        self.region = region

    def marker_scales(self) -> List[float]:
        return self.emphasis.scales(self.offsets.last_offset, len(self.points), self.visibility.state)

    def snapshot(self) -> ScreenSnapshot:
        return ScreenSnapshot(
            session_id=self.session_id,
            generation=self.points.generation,
            point_count=len(self.points),
            scroll=self.sync.state(),
            visibility=self.visibility.state,
            visibility_progress=self.visibility.progress(),
            closed=self._closed,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.sync.close()
        for detach in self._detach:
            detach()
        self._detach.clear()
        self.offsets.close()
        self._listeners.clear()
        self._record("closed", {})
        logger.info("Session %s closed", self.session_id)

    def _publish_scales(self, offset: float) -> None:
        if self._closed or not len(self.points):
            return
        self._emit("marker_scales", MarkerScales(scales=self.marker_scales()))

    def _emit(self, kind: str, command: Any) -> None:
        if self._closed:
            logger.debug("Suppressing %s after teardown of session %s", kind, self.session_id)
            return
        payload = command.model_dump(mode="json")
        logger.debug("Session %s emits %s: %s", self.session_id, kind, payload)
        if kind != "marker_scales":
            self._record(kind, payload)
        dispatch(self._collaborators.get(kind), command)
        for listener in list(self._listeners):
            dispatch(listener, payload)

    def _record(self, event: str, data: Dict[str, Any]) -> None:
        if self.record_events:
            log_event(self.session_id, event, data)
