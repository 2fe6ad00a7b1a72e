"""
Animation clock supplying the ``time`` parameter to the field evaluators.
"""

from __future__ import annotations

from .constants import FRAME_TIME
from .settings import AnimationState


class AnimationClock:
    """
    Scalar animation time advanced by an external per-frame scheduler.

    The clock performs no field computation. Evaluators receive
    ``clock.time`` explicitly, so fields stay pure functions of their inputs.
    """

    def __init__(self, speed_multiplier: float = 1.0, time: float = 0.0, is_animating: bool = True):
        self.speed_multiplier = speed_multiplier
        self.time = time
        self.is_animating = is_animating

    def advance(self, delta: float = FRAME_TIME) -> float:
        """Add ``delta * speed_multiplier`` to the time unless paused."""
        if self.is_animating:
            self.time += delta * self.speed_multiplier
        return self.time

    def reset(self) -> None:
        self.time = 0.0

    def pause(self) -> None:
        self.is_animating = False

    def resume(self) -> None:
        self.is_animating = True

    def toggle(self) -> bool:
        self.is_animating = not self.is_animating
        return self.is_animating

    def state(self) -> AnimationState:
        return AnimationState(time=self.time, is_animating=self.is_animating)

    def __repr__(self) -> str:
        return (
            f"AnimationClock(time={self.time:.4f}, speed_multiplier={self.speed_multiplier}, "
            f"is_animating={self.is_animating})"
        )


__all__ = ["AnimationClock"]
