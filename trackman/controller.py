"""
Foreground tracking session.

STOPPED -> STARTING -> RUNNING -> STOPPED. While RUNNING every published
activity refreshes the status indicator and sends the policy's start/stop
requests to both trackers. Each request runs on the signal executor on its
own, so a slow or failing tracker never holds up the other one or the
next transition event.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, Optional

from trackman.activity import ActivityType
from trackman.exceptions import PermissionMissing, RegistrationFailure
from trackman.logging_config import get_logger
from trackman.notifications import status_text
from trackman.permissions import Capability
from trackman.policy import Action, decide
from trackman.receiver import TransitionReceiver

logger = get_logger("controller", "service.log")


class SessionState(Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class SessionController:
    def __init__(self, store, source, signalers: Dict[str, object], notifier, permissions,
                 executor=None):
        self.store = store
        self.source = source
        self.signalers = signalers
        self.notifier = notifier
        self.permissions = permissions
        self.receiver = TransitionReceiver(store)

        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="signal")
        self._lock = threading.Lock()
        self._state = SessionState.STOPPED

        store.set_tracking(False)
        self._unsubscribe = store.current_activity.subscribe(self._on_activity)
        logger.debug("Started observing store activity.")

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def running(self) -> bool:
        with self._lock:
            return self._state is SessionState.RUNNING

    # ---------------------------------------------------
    #                 LIFECYCLE
    # ---------------------------------------------------
    def start(self) -> SessionState:
        with self._lock:
            if self._state is not SessionState.STOPPED:
                logger.warning(f"Session already {self._state.value}, ignoring start command.")
                return self._state

            if not self.permissions.has_activity_permission():
                logger.error("ACTIVITY_RECOGNITION permission not granted. Staying stopped.")
                raise PermissionMissing([Capability.ACTIVITY_RECOGNITION.value])

            self._state = SessionState.STARTING

        logger.info("Starting tracking session...")
        initial = self.store.current_activity.value
        self.notifier.show_status(status_text(initial))

        try:
            self.source.register(self.receiver)
        except RegistrationFailure as e:
            logger.error(f"FAILED registration for activity transition updates: {e}")
            self.notifier.clear_status()
            with self._lock:
                self._state = SessionState.STOPPED
            raise

        with self._lock:
            self._state = SessionState.RUNNING
        self.store.set_tracking(True)
        logger.info("Session started and registered for transitions.")
        return SessionState.RUNNING

    def stop(self) -> SessionState:
        with self._lock:
            if self._state is SessionState.STOPPED:
                logger.warning("Stop command ignored: session wasn't running.")
                return self._state
            self._state = SessionState.STOPPED

        logger.info("Stopping tracking session...")
        self.store.set_tracking(False)

        try:
            self.source.unregister()
        except Exception as e:
            logger.exception(f"FAILED to unregister from activity updates: {e}")

        self.notifier.clear_status()
        logger.info("Session stopped.")
        return SessionState.STOPPED

    def registration_lost(self, reason: str) -> None:
        """The platform dropped the subscription while running."""
        logger.error(f"Transition registration lost: {reason}")
        self.stop()

    def close(self) -> None:
        self.stop()
        self._unsubscribe()
        self._executor.shutdown(wait=False)

    # ---------------------------------------------------
    #                 ACTIVITY UPDATES
    # ---------------------------------------------------
    def _on_activity(self, activity: Optional[ActivityType]) -> None:
        if not self.running:
            return

        label = activity.title if activity else "Unknown"
        logger.debug(f"Observed activity change: {label}")

        self.notifier.show_status(status_text(activity))
        for action in decide(activity):
            self._executor.submit(self._dispatch, action)

    def _dispatch(self, action: Action):
        signaler = self.signalers.get(action.target)
        if signaler is None:
            logger.error(f"No signaler configured for '{action.target}'")
            return None

        try:
            error = signaler.signal(action.verb, **action.extras)
        except Exception as e:
            logger.exception(f"{action.target} {action.verb.name} dispatch crashed: {e}")
            return e

        if error is not None:
            logger.warning(f"{action.target} {action.verb.name} not delivered: {type(error).__name__}")
        return error
