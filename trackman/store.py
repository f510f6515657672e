"""
In-memory status store shared by the session controller, the receiver
and the HTTP surface.

Each field is observable on its own: a new subscriber is called at once
with the current value and then with every later publication. Writes come
from a single producer (the receiver / controller path); reads may happen
from any thread and always see a published value.
"""
import threading
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

from trackman.activity import ActivityType, decode
from trackman.logging_config import get_logger

logger = get_logger("store", "store.log")

T = TypeVar("T")


@dataclass(frozen=True)
class StatusSnapshot:
    tracking_enabled: bool
    current_activity: Optional[ActivityType]
    update_count: int

    @property
    def is_in_vehicle(self) -> bool:
        return self.current_activity is ActivityType.IN_VEHICLE

    @property
    def is_on_bicycle(self) -> bool:
        return self.current_activity is ActivityType.ON_BICYCLE


class StateField(Generic[T]):
    """A single observable value with replay of the latest value on subscribe."""

    def __init__(self, name: str, initial: T, state_lock: threading.Lock, publish_lock: threading.RLock):
        self.name = name
        self._value = initial
        self._state_lock = state_lock
        self._publish_lock = publish_lock
        self._subscribers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        with self._state_lock:
            return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        with self._publish_lock:
            self._subscribers.append(callback)
            self._deliver(callback, self.value)

        def unsubscribe():
            with self._publish_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _set(self, value: T) -> None:
        # caller holds the state lock
        self._value = value

    def _notify(self, value: T) -> None:
        # caller holds the publish lock
        for callback in list(self._subscribers):
            self._deliver(callback, value)

    def _deliver(self, callback, value):
        try:
            callback(value)
        except Exception as e:
            logger.exception(f"Subscriber of '{self.name}' failed: {e}")


class StatusStore:
    """Holds tracking flag, current activity and update counter."""

    def __init__(self):
        self._state_lock = threading.Lock()
        self._publish_lock = threading.RLock()

        self.tracking = StateField("tracking", False, self._state_lock, self._publish_lock)
        self.current_activity: StateField[Optional[ActivityType]] = StateField(
            "current_activity", None, self._state_lock, self._publish_lock
        )
        self.update_count = StateField("update_count", 0, self._state_lock, self._publish_lock)

    # ---------- writers ----------
    def set_tracking(self, enabled: bool) -> None:
        with self._publish_lock:
            with self._state_lock:
                self.tracking._set(enabled)
            logger.debug(f"Updating tracking to: {enabled}")
            self.tracking._notify(enabled)

    def record_transition(self, raw_code: Optional[int]) -> ActivityType:
        """
        Count one received transition event, then decode and publish its
        category. Publishes even when the category did not change.
        """
        activity = decode(raw_code)
        with self._publish_lock:
            # both fields change together so snapshots never see half an update
            with self._state_lock:
                count = self.update_count._value + 1
                self.update_count._set(count)
                self.current_activity._set(activity)

            logger.debug(f"Updating status to: {activity.title} (update #{count})")
            self.update_count._notify(count)
            self.current_activity._notify(activity)

        return activity

    # ---------- readers ----------
    def snapshot(self) -> StatusSnapshot:
        with self._state_lock:
            return StatusSnapshot(
                tracking_enabled=self.tracking._value,
                current_activity=self.current_activity._value,
                update_count=self.update_count._value,
            )
