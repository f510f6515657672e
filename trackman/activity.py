"""
Activity categories and the raw platform codes they decode from.

Raw codes are the DetectedActivity / ActivityTransition constants used by
the Android activity-recognition API.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# DetectedActivity codes
IN_VEHICLE = 0
ON_BICYCLE = 1
ON_FOOT    = 2
STILL      = 3
UNKNOWN    = 4
TILTING    = 5
WALKING    = 7
RUNNING    = 8

# ActivityTransition codes
ACTIVITY_TRANSITION_ENTER = 0
ACTIVITY_TRANSITION_EXIT  = 1


class ActivityType(Enum):
    IN_VEHICLE = "In Vehicle"
    ON_BICYCLE = "On Bicycle"
    RUNNING    = "Running"
    STILL      = "Still"
    WALKING    = "Walking"
    ON_FOOT    = "On Foot"
    UNKNOWN    = "Unknown"

    @property
    def title(self) -> str:
        return self.value


_BY_CODE = {
    IN_VEHICLE: ActivityType.IN_VEHICLE,
    ON_BICYCLE: ActivityType.ON_BICYCLE,
    RUNNING:    ActivityType.RUNNING,
    STILL:      ActivityType.STILL,
    WALKING:    ActivityType.WALKING,
    ON_FOOT:    ActivityType.ON_FOOT,
}

_TRANSITION_NAMES = {
    ACTIVITY_TRANSITION_ENTER: "ENTER",
    ACTIVITY_TRANSITION_EXIT:  "EXIT",
}


def decode(raw_code: Optional[int]) -> ActivityType:
    """Map a raw activity code to its category; anything unrecognised is UNKNOWN."""
    return _BY_CODE.get(raw_code, ActivityType.UNKNOWN)


def activity_type_to_string(raw_code: int) -> str:
    activity = _BY_CODE.get(raw_code)
    if activity is None:
        return f"UNKNOWN ({raw_code})"
    return activity.name


def transition_type_to_string(raw_code: int) -> str:
    return _TRANSITION_NAMES.get(raw_code, f"UNKNOWN ({raw_code})")


@dataclass(frozen=True)
class TransitionEvent:
    activity_type: int
    transition_type: int
    elapsed_realtime_nanos: Optional[int] = None

    def __str__(self):
        return (
            f"Activity={activity_type_to_string(self.activity_type)}, "
            f"Transition={transition_type_to_string(self.transition_type)}"
        )
