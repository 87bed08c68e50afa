import json
import os
from collections.abc import Mapping
from functools import lru_cache

import structlog

from ..config import Settings, get_settings
from .body_parts import FULL_BODY_KEY, normalize_key

logger = structlog.get_logger(__name__)

DEFAULT_REST_WINDOW_HOURS = 48.0

# Hours a body part needs between sessions. Large groups recover slower
# than small or stabilising ones.
DEFAULT_REST_WINDOWS: dict[str, float] = {
    "chest": 48,
    "back": 48,
    "upper back": 48,
    "lower back": 72,
    "shoulders": 48,
    "traps": 48,
    "upper arms": 48,
    "upper body": 48,
    "arms": 48,
    "biceps": 36,
    "triceps": 36,
    "forearms": 36,
    "lower arms": 36,
    "core": 24,
    "abs": 24,
    "obliques": 24,
    "waist": 24,
    "neck": 24,
    "glutes": 72,
    "hips": 72,
    "hamstrings": 72,
    "quadriceps": 72,
    "upper legs": 72,
    "legs": 72,
    "calves": 48,
    "lower legs": 48,
    "cardio": 24,
    "mobility": 24,
    FULL_BODY_KEY: 72,
}


class InvalidRestWindowTableError(ValueError):
    pass


class RestWindowPolicy:
    """Static lookup from canonical body-part key to rest-window hours.

    Total by construction: unmapped keys get ``default_hours``.
    """

    def __init__(self, windows: Mapping[str, float], default_hours: float = DEFAULT_REST_WINDOW_HOURS):
        if default_hours <= 0:
            raise InvalidRestWindowTableError(f"default rest window must be positive, got {default_hours!r}")
        normalized: dict[str, float] = {}
        for raw_key, hours in windows.items():
            if isinstance(hours, bool) or not isinstance(hours, int | float) or hours <= 0:
                raise InvalidRestWindowTableError(f"rest window for {raw_key!r} must be a positive number")
            normalized[normalize_key(raw_key)] = float(hours)
        self._windows = normalized
        self.default_hours = float(default_hours)

    def rest_window_hours(self, key: str) -> float:
        return self._windows.get(normalize_key(key), self.default_hours)

    def as_dict(self) -> dict[str, float]:
        return dict(self._windows)


def load_rest_windows(settings: Settings) -> dict[str, float]:
    table = dict(DEFAULT_REST_WINDOWS)
    raw_json = settings.RECOVERY_REST_WINDOWS_JSON
    path = settings.RECOVERY_REST_WINDOWS_PATH

    if raw_json:
        try:
            overrides = json.loads(raw_json)
        except json.JSONDecodeError as e:
            raise InvalidRestWindowTableError("Invalid JSON in RECOVERY_REST_WINDOWS_JSON") from e
        source = "env"
    elif path:
        if not os.path.exists(path):
            raise InvalidRestWindowTableError(f"Rest window table not found at {path}")
        try:
            with open(path) as f:
                overrides = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidRestWindowTableError(f"Error reading rest window table from {path}") from e
        source = "file"
    else:
        return table

    if not isinstance(overrides, dict):
        raise InvalidRestWindowTableError("Rest window table must be a JSON object")
    logger.info("rest_windows_loaded", source=source, entries=len(overrides))
    table.update(overrides)
    return table


def build_rest_window_policy(settings: Settings) -> RestWindowPolicy:
    return RestWindowPolicy(
        load_rest_windows(settings),
        default_hours=settings.RECOVERY_DEFAULT_REST_WINDOW_HOURS,
    )


@lru_cache()
def get_rest_window_policy() -> RestWindowPolicy:
    return build_rest_window_policy(get_settings())
