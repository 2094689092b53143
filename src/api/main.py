# src/api/main.py
import asyncio
import json

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from models.schemas import PlacesSearchRequest, PointOfInterest, Region, ScreenSnapshot
from screen.controller import MapScreen
from screen.settings import SyncSettings

load_dotenv()

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

settings = SyncSettings.from_env()
sessions: dict[str, MapScreen] = {}
STREAM_POLL_SECONDS = 1.0


class SessionRequest(BaseModel):
    session_id: str = Field(..., min_length=1, description="Client-provided screen session identifier")


class SearchRequest(BaseModel):
    latitude: float | None = None
    longitude: float | None = None
    radius_m: int | None = Field(default=None, gt=0)


class OffsetRequest(BaseModel):
    offset: float


class SessionState(BaseModel):
    snapshot: ScreenSnapshot
    marker_scales: list[float]


def _session(session_id: str) -> MapScreen:
    screen = sessions.get(session_id)
    if screen is None:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
    return screen


def _state(screen: MapScreen) -> SessionState:
    return SessionState(snapshot=screen.snapshot(), marker_scales=screen.marker_scales())


@app.post("/sessions", response_model=SessionState, status_code=201)
async def create_session(req: SessionRequest) -> SessionState:
    if req.session_id in sessions:
        raise HTTPException(status_code=409, detail=f"Session {req.session_id} already exists")
    screen = MapScreen(req.session_id, settings)
    sessions[req.session_id] = screen
    return _state(screen)


@app.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: str) -> SessionState:
    return _state(_session(session_id))


@app.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str) -> None:
    screen = _session(session_id)
    screen.close()
    sessions.pop(session_id, None)


@app.post("/sessions/{session_id}/search", response_model=list[PointOfInterest])
async def search(session_id: str, req: SearchRequest) -> list[PointOfInterest]:
    screen = _session(session_id)
    region = screen.region
    if req.latitude is not None and req.longitude is not None:
        region = Region(
            latitude=req.latitude,
            longitude=req.longitude,
            latitude_delta=region.latitude_delta,
            longitude_delta=region.longitude_delta,
        )
        screen.update_region(region)
    search_req = PlacesSearchRequest(
        latitude=region.latitude,
        longitude=region.longitude,
        radius_m=req.radius_m or settings.search_radius_m,
    )
    return await screen.load_places(search_req)


@app.post("/sessions/{session_id}/offset", response_model=SessionState)
async def scroll(session_id: str, req: OffsetRequest) -> SessionState:
    screen = _session(session_id)
    screen.scroll(req.offset)
    return _state(screen)


@app.post("/sessions/{session_id}/markers/{index}", response_model=SessionState)
async def press_marker(session_id: str, index: int) -> SessionState:
    screen = _session(session_id)
    screen.marker_pressed(index)
    return _state(screen)


@app.post("/sessions/{session_id}/background-tap", response_model=SessionState)
async def press_background(session_id: str) -> SessionState:
    screen = _session(session_id)
    screen.background_pressed()
    return _state(screen)


@app.get("/sessions/{session_id}/stream")
async def command_stream(session_id: str):
    screen = _session(session_id)

    async def event_generator():
        queue: asyncio.Queue = asyncio.Queue()
        remove = screen.add_listener(queue.put_nowait)
        try:
            while True:
                try:
                    evt = await asyncio.wait_for(queue.get(), timeout=STREAM_POLL_SECONDS)
                except asyncio.TimeoutError:
                    # Commands queued before teardown are still delivered.
                    if screen.closed:
                        break
                    continue
                yield f"data: {json.dumps(evt)}\n\n"
        finally:
            remove()

    return StreamingResponse(event_generator(), media_type="text/event-stream")
