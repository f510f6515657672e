from typing import List

from trackman.activity import TransitionEvent
from trackman.logging_config import get_logger

logger = get_logger("receiver", "receiver.log")

TRANSITIONS_RECEIVER_ACTION = "com.chromian.trackman.TRANSITION_ACTION"


def extract_events(payload: dict) -> List[TransitionEvent]:
    """
    Parse the `transitionEvents` block of an inbound payload.
    Raises ValueError on malformed entries.
    """
    raw_events = payload.get("transitionEvents")
    if raw_events is None:
        return []
    if not isinstance(raw_events, list):
        raise ValueError(f"transitionEvents must be a list, got {type(raw_events).__name__}")

    events = []
    for raw in raw_events:
        try:
            events.append(TransitionEvent(
                activity_type=int(raw["activityType"]),
                transition_type=int(raw["transitionType"]),
                elapsed_realtime_nanos=raw.get("elapsedRealTimeNanos"),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"malformed transition event {raw!r}: {e}") from e
    return events


class TransitionReceiver:
    """Decodes inbound transition payloads into store updates."""

    def __init__(self, store, action: str = TRANSITIONS_RECEIVER_ACTION):
        self.store = store
        self.action = action

    def on_receive(self, payload: dict) -> int:
        """Returns the number of events recorded."""
        action = (payload or {}).get("action")
        logger.debug(f"on_receive triggered for action: {action}")

        if action != self.action:
            logger.warning(f"Received unknown intent action: {action}")
            return 0

        if "transitionEvents" not in payload:
            logger.warning("Payload did not contain a transition result.")
            return 0

        events = extract_events(payload)
        for event in events:
            logger.info(f"Transition event: {event}")
            self.store.record_transition(event.activity_type)
        return len(events)
