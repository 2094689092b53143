import httpx

from models.schemas import Coordinate, PlaceRecord, Region


class MockResponse:
    def __init__(self, payload: dict, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code
        self.request = httpx.Request("GET", "https://mock")

    def json(self) -> dict:
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                "mock error",
                request=self.request,
                response=httpx.Response(self.status_code, request=self.request),
            )


class MockAsyncClient:
    def __init__(self, response: MockResponse):
        self.response = response
        self.calls: list[tuple[str, dict | None]] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url: str, params=None):
        self.calls.append((url, params))
        return self.response


class FakeTimer:
    def __init__(self, scheduler: "FakeScheduler", due: float, callback, args):
        self.scheduler = scheduler
        self.due = due
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manually advanced stand-in for the event loop's call_later."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback, *args) -> FakeTimer:
        timer = FakeTimer(self, self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for timer in sorted(self.timers, key=lambda t: t.due):
            if not timer.cancelled and timer.due <= self.now:
                self.timers.remove(timer)
                timer.callback(*timer.args)


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


REGION = Region(latitude=51.5, longitude=-0.12, latitude_delta=0.05, longitude_delta=0.04)


def place(idx: int, with_coordinate: bool = True) -> PlaceRecord:
    return PlaceRecord(
        coordinate=Coordinate(latitude=51.5 + idx * 0.001, longitude=-0.12 - idx * 0.001) if with_coordinate else None,
        title=f"Toilet {idx}",
        address=f"{idx} High Street",
        rating=4.0,
        review_count=idx * 3,
    )


def places(count: int) -> list[PlaceRecord]:
    return [place(idx) for idx in range(count)]
