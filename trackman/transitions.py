"""
Registration for activity-transition updates.

Transitions are pushed to the webhook by the platform bridge; the source
only accepts them while a receiver is registered.
"""
import threading
from typing import List, Optional, Tuple

from trackman import activity
from trackman.exceptions import RegistrationFailure
from trackman.logging_config import get_logger

logger = get_logger("transitions", "service.log")

MONITORED_ACTIVITIES = (
    activity.IN_VEHICLE,
    activity.ON_BICYCLE,
    activity.RUNNING,
    activity.WALKING,
    activity.STILL,
)


def build_transition_list() -> List[Tuple[int, int]]:
    transitions = []
    for activity_type in MONITORED_ACTIVITIES:
        transitions.append((activity_type, activity.ACTIVITY_TRANSITION_ENTER))
        transitions.append((activity_type, activity.ACTIVITY_TRANSITION_EXIT))
    logger.debug(f"Built transition list for {len(transitions) // 2} activity types.")
    return transitions


class WebhookTransitionSource:
    def __init__(self, permissions):
        self.permissions = permissions
        self._lock = threading.Lock()
        self._receiver = None
        self.requested: List[Tuple[int, int]] = []

    @property
    def registered(self) -> bool:
        return self._receiver is not None

    def register(self, receiver) -> None:
        if not self.permissions.has_activity_permission():
            raise RegistrationFailure("ACTIVITY_RECOGNITION permission missing")

        with self._lock:
            if self._receiver is not None:
                raise RegistrationFailure("a receiver is already registered for transition updates")
            self.requested = build_transition_list()
            self._receiver = receiver
        logger.info(f"Registered for {len(self.requested)} activity transitions.")

    def unregister(self) -> None:
        with self._lock:
            if self._receiver is None:
                logger.warning("No receiver registered. No unregistration needed.")
                return
            self._receiver = None
            self.requested = []
        logger.info("Unregistered from activity transition updates.")

    def deliver(self, payload: dict) -> Optional[int]:
        """Hand an inbound payload to the registered receiver; None when nobody listens."""
        with self._lock:
            receiver = self._receiver
        if receiver is None:
            logger.warning("Transition payload received while not registered; ignored.")
            return None
        return receiver.on_receive(payload)
