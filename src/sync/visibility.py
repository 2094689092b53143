import math
import time
from typing import Callable, Optional

from models.schemas import TrayAnimationCommand, VisibilityState
from sync.events import Collaborator, dispatch


def ease_in_out(progress: float) -> float:
    return 0.5 - 0.5 * math.cos(math.pi * progress)


class VisibilityToggle:
    """
    Shown/hidden state of the card tray.

    The logical state flips as soon as toggle() is called. Progress (0 fully
    shown, 1 fully hidden) moves toward the new state at a constant rate, so a
    toggle mid-flight reverses from wherever the tray currently is.
    """

    def __init__(
        self,
        hidden_offset: float,
        duration_ms: int = 500,
        *,
        on_animate: Optional[Collaborator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.hidden_offset = hidden_offset
        self.duration_ms = duration_ms
        self.on_animate = on_animate
        self._clock = clock
        self._state = VisibilityState.SHOWN
        self._from_progress = 0.0
        self._started_at = clock()

    @property
    def state(self) -> VisibilityState:
        return self._state

    @property
    def target_progress(self) -> float:
        return 0.0 if self._state == VisibilityState.SHOWN else 1.0

    def progress(self) -> float:
        target = self.target_progress
        if self.duration_ms <= 0:
            return target
        travelled = (self._clock() - self._started_at) * 1000.0 / self.duration_ms
        if target > self._from_progress:
            return min(target, self._from_progress + travelled)
        return max(target, self._from_progress - travelled)

    def tray_offset(self) -> float:
        return ease_in_out(self.progress()) * self.hidden_offset

    def toggle(self) -> TrayAnimationCommand:
        current = self.progress()
        self._state = VisibilityState.HIDDEN if self._state == VisibilityState.SHOWN else VisibilityState.SHOWN
        self._from_progress = current
        self._started_at = self._clock()

        target = self.target_progress
        command = TrayAnimationCommand(
            state=self._state,
            to_offset=target * self.hidden_offset,
            duration_ms=round(abs(target - current) * self.duration_ms),
        )
        dispatch(self.on_animate, command)
        return command
