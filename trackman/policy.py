"""Mapping from the current activity to start/stop requests for both trackers."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from trackman.activity import ActivityType
from trackman.config import TRACK_CATEGORY

OPENTRACKS = "opentracks"
GEOTRACKER = "geotracker"


class Verb(Enum):
    START  = "start"
    STOP   = "stop"
    PAUSE  = "pause"
    RESUME = "resume"


@dataclass(frozen=True)
class Action:
    target: str
    verb: Verb
    extras: Dict[str, str] = field(default_factory=dict)


def decide(activity: Optional[ActivityType], track_category: str = TRACK_CATEGORY) -> List[Action]:
    """
    IN_VEHICLE starts both trackers; anything else (None included) stops them.
    No memory of previous decisions: repeated input gives repeated output.
    """
    if activity is ActivityType.IN_VEHICLE:
        return [
            Action(OPENTRACKS, Verb.START, {"category": track_category}),
            Action(GEOTRACKER, Verb.START),
        ]

    return [
        Action(OPENTRACKS, Verb.STOP),
        Action(GEOTRACKER, Verb.STOP),
    ]
