"""
Persistent status indicator and one-shot user notices.

TermuxNotifier posts real Android notifications/toasts through the
Termux:API commands; LogNotifier only writes to the log.
"""
import subprocess
from typing import Optional

from trackman.activity import ActivityType
from trackman.config import NOTIFIER
from trackman.logging_config import get_logger

logger = get_logger("notifications", "service.log")

NOTIFICATION_ID = 2
CHANNEL_ID = "ActivityTrackingChannel"
TITLE = "Activity Tracking"
PLACEHOLDER = "Tracking activity..."


def status_text(activity: Optional[ActivityType]) -> str:
    if activity is None or activity is ActivityType.UNKNOWN:
        return PLACEHOLDER
    return activity.title


class LogNotifier:
    def show_status(self, text: str) -> None:
        logger.info(f"[indicator] {TITLE}: {text}")

    def clear_status(self) -> None:
        logger.info("[indicator] cleared")

    def notice(self, text: str) -> None:
        logger.warning(f"[notice] {text}")


class TermuxNotifier:
    """Notification slot NOTIFICATION_ID is reused for every refresh."""

    def __init__(self, timeout: float = 10):
        self.timeout = timeout

    def show_status(self, text: str) -> None:
        self._run([
            "termux-notification",
            "--id", str(NOTIFICATION_ID),
            "--channel", CHANNEL_ID,
            "--title", TITLE,
            "--content", text,
            "--ongoing",
            "--alert-once",
            "--priority", "low",
        ])

    def clear_status(self) -> None:
        self._run(["termux-notification-remove", str(NOTIFICATION_ID)])

    def notice(self, text: str) -> None:
        self._run(["termux-toast", text])

    def _run(self, cmd) -> bool:
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=self.timeout)
            return True
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"'{cmd[0]}' failed: {e}")
            return False


def make_notifier(kind: str = NOTIFIER):
    if kind == "termux":
        return TermuxNotifier()
    if kind == "log":
        return LogNotifier()
    raise ValueError(f"Unknown notifier '{kind}' (expected 'termux' or 'log')")
