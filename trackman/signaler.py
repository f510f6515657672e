"""
Shared delivery path for the tracker integrations.

A signal is attempted once. Failures are logged, shown to the user as a
one-shot notice and returned to the caller; they are never raised.
"""
from dataclasses import dataclass
from typing import FrozenSet, Optional

from trackman.exceptions import DispatchFailure, SignalError, SignalPermissionDenied, TargetUnavailable
from trackman.intents import ActivityManager, Intent
from trackman.logging_config import get_logger
from trackman.policy import Verb

logger = get_logger("signaler", "signals.log")


@dataclass(frozen=True)
class TrackerTarget:
    key: str
    label: str
    package: str
    verbs: FrozenSet[Verb]


class TrackerSignaler:
    target: TrackerTarget

    # user-facing notices, one per error kind
    not_found_notice = "Tracker not found or cannot handle action."
    permission_notice = "Permission denied for tracker action."
    failure_notice = "Failed to signal tracker."

    def __init__(self, dispatcher=None, notifier=None):
        self.dispatcher = dispatcher or ActivityManager()
        self.notifier = notifier

    def build_intent(self, verb: Verb, **extras) -> Intent:
        raise NotImplementedError

    def signal(self, verb: Verb, **extras) -> Optional[SignalError]:
        label = self.target.label
        if verb not in self.target.verbs:
            raise ValueError(f"{label} does not support '{verb.value}'")

        intent = self.build_intent(verb, **extras)
        logger.debug(f"Preparing {verb.name} intent for {self.target.package}: {intent}")

        try:
            self.dispatcher.start_activity(self.target.key, intent)
            logger.info(f"Successfully sent {verb.name} intent to {self.target.package}")
            return None

        except TargetUnavailable as e:
            logger.error(f"Error sending intent: {label} ({self.target.package}) not found "
                         f"or doesn't handle {verb.name}: {e}")
            self._notice(self.not_found_notice)
            return e
        except SignalPermissionDenied as e:
            logger.error(f"Error sending intent: permission denied for {label} {verb.name}: {e}")
            self._notice(self.permission_notice)
            return e
        except SignalError as e:
            logger.error(f"Failed to signal {label} ({verb.name}): {e}")
            self._notice(self.failure_notice)
            return e
        except Exception as e:
            logger.exception(f"An unexpected error occurred when sending intent to {label}: {e}")
            self._notice(self.failure_notice)
            return DispatchFailure(self.target.key, str(e))

    def _notice(self, text: str) -> None:
        if self.notifier is not None:
            self.notifier.notice(text)
