from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..core.constants import DEFAULT_MEAL_WINDOWS
from ..core.enums import MealPeriod, MealType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class MealWindow:
    """Local-time interval [start, end) during which a meal is served."""

    meal_type: MealType
    start: time
    end: time

    def contains(self, moment: time) -> bool:
        return self.start <= moment < self.end

    @property
    def label(self) -> str:
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"


class MealWindowClassifier:
    """Maps a timestamp to the meal being served, if any.

    The same instance answers live scans and the "current meal" status shown
    to operators, so both always agree.
    """

    def __init__(self, windows: Optional[Iterable[MealWindow]] = None):
        if windows is None:
            windows = [MealWindow(meal, start, end) for meal, start, end in DEFAULT_MEAL_WINDOWS]
        self._windows = _validated(list(windows))

    @property
    def windows(self) -> Sequence[MealWindow]:
        return tuple(self._windows)

    def classify(self, when: datetime) -> MealPeriod:
        moment = when.time()
        for window in self._windows:
            if window.contains(moment):
                return MealPeriod.for_meal(window.meal_type)
        return MealPeriod.NOT_MEAL_TIME

    def window_for(self, meal_type: MealType) -> Optional[MealWindow]:
        for window in self._windows:
            if window.meal_type == meal_type:
                return window
        return None


def _validated(windows: list[MealWindow]) -> list[MealWindow]:
    seen: set[MealType] = set()
    for w in windows:
        if w.start >= w.end:
            raise ValidationError(f"Meal window for {w.meal_type.value} is empty")
        if w.meal_type in seen:
            raise ValidationError(f"Meal window for {w.meal_type.value} defined twice")
        seen.add(w.meal_type)

    ordered = sorted(windows, key=lambda w: w.start)
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt.start < prev.end:
            raise ValidationError(f"Meal windows {prev.meal_type.value} and {nxt.meal_type.value} overlap")
    return ordered


def parse_meal_windows(value: Optional[str]) -> Optional[list[MealWindow]]:
    """Parse the MEAL_WINDOWS setting.

    Format: ``breakfast=07:00-10:00,lunch=12:00-15:00,dinner=19:00-22:00``.
    Meals left out of the setting are not served. Returns None for an empty
    value so callers fall back to the defaults.
    """

    if not value or not value.strip():
        return None

    windows = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            name, span = part.split("=", 1)
            start_s, end_s = span.split("-", 1)
            windows.append(MealWindow(MealType(name.strip().lower()), parse_hhmm(start_s), parse_hhmm(end_s)))
        except ValueError:
            raise ValidationError(f"Invalid meal window: {part!r}")
    return windows
