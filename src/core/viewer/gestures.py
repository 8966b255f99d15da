"""
Touch gesture interpretation for the media viewer.

One gesture session runs from a touch start to the following touch end and
recognises exactly one of two gesture classes:

- pinch: two touch points, reports incremental scale ratios while moving
- swipe: one touch point, classified once on touch end

A new touch start always discards whatever the previous session left behind.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Sequence


class TouchPoint(NamedTuple):
    x: float
    y: float


class SwipeIntent(Enum):
    NONE = "none"
    NEXT = "next"
    PREVIOUS = "previous"
    DISMISS = "dismiss"


class GestureKind(Enum):
    IDLE = "idle"
    PINCH = "pinch"
    SWIPE = "swipe"


@dataclass(frozen=True)
class GestureUpdate:
    """Result of feeding one touch event to the tracker."""
    pinch_scale: Optional[float] = None   # set while a pinch moves
    pinch_ended: bool = False
    swipe: SwipeIntent = SwipeIntent.NONE


NO_UPDATE = GestureUpdate()


def distance(a: TouchPoint, b: TouchPoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def classify_swipe(start: TouchPoint, end: TouchPoint, threshold: float = 50.0) -> SwipeIntent:
    """
    Classify a single-finger swipe from its start and end coordinates.

    Deltas are start minus end, so a finger moving left gives dx > 0 (next)
    and a finger moving down gives dy < 0 (dismiss). Both checks use strict
    inequalities: a diagonal with |dx| == |dy| resolves to NONE.
    """
    dx = start.x - end.x
    dy = start.y - end.y

    if abs(dx) > abs(dy) and abs(dx) > threshold:
        return SwipeIntent.NEXT if dx > 0 else SwipeIntent.PREVIOUS

    if dy < -threshold and abs(dy) > abs(dx):
        return SwipeIntent.DISMISS

    return SwipeIntent.NONE


class GestureTracker:
    """Transient state of the current gesture session."""

    def __init__(self, swipe_threshold: float = 50.0):
        self.swipe_threshold = swipe_threshold
        self.reset()

    def reset(self) -> None:
        self.kind = GestureKind.IDLE
        self.pinch_distance = 0.0
        self.swipe_start: Optional[TouchPoint] = None
        self.swipe_end: Optional[TouchPoint] = None

    @property
    def is_pinching(self) -> bool:
        return self.kind is GestureKind.PINCH

    def touch_start(self, points: Sequence[TouchPoint]) -> GestureUpdate:
        self.reset()
        if len(points) == 2:
            self.kind = GestureKind.PINCH
            self.pinch_distance = distance(points[0], points[1])
        elif len(points) == 1:
            self.kind = GestureKind.SWIPE
            self.swipe_start = TouchPoint(*points[0])
        return NO_UPDATE

    def touch_move(self, points: Sequence[TouchPoint]) -> GestureUpdate:
        if len(points) == 2 and self.is_pinching:
            current = distance(points[0], points[1])
            if self.pinch_distance <= 0:
                self.pinch_distance = current
                return NO_UPDATE
            scale = current / self.pinch_distance
            self.pinch_distance = current
            return GestureUpdate(pinch_scale=scale)

        if len(points) == 1 and self.kind is GestureKind.SWIPE:
            self.swipe_end = TouchPoint(*points[0])
        return NO_UPDATE

    def touch_end(self) -> GestureUpdate:
        if self.is_pinching:
            self.reset()
            return GestureUpdate(pinch_ended=True)

        start, end = self.swipe_start, self.swipe_end
        self.reset()
        if start is None or end is None:
            return NO_UPDATE
        return GestureUpdate(swipe=classify_swipe(start, end, self.swipe_threshold))
