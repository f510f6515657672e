"""
Intent delivery through the Android activity manager (`am start`).

`am` reports most failures on stdout/stderr while still exiting 0, so the
outcome is classified from its output as well as its return code.
"""
import subprocess
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from trackman.config import AM_BINARY, DISPATCH_TIMEOUT_S
from trackman.exceptions import DispatchFailure, SignalPermissionDenied, TargetUnavailable
from trackman.logging_config import get_logger

logger = get_logger("intents", "signals.log")

ACTION_VIEW = "android.intent.action.VIEW"
FLAG_ACTIVITY_NEW_TASK = 0x10000000

_NOT_FOUND_MARKERS = ("unable to resolve Intent", "does not exist", "ActivityNotFoundException")
_SECURITY_MARKERS = ("SecurityException", "Permission Denial")


@dataclass
class Intent:
    action: Optional[str] = None
    data: Optional[str] = None
    package: Optional[str] = None
    component: Optional[str] = None      # "<package>/<class>"
    flags: int = 0
    extras: Dict[str, str] = field(default_factory=dict)

    def set_class_name(self, package: str, class_name: str) -> "Intent":
        self.component = f"{package}/{class_name}"
        return self

    def put_extra(self, key: str, value: str) -> "Intent":
        self.extras[key] = value
        return self

    def add_flags(self, flags: int) -> "Intent":
        self.flags |= flags
        return self

    def to_args(self) -> List[str]:
        args = []
        if self.action:
            args += ["-a", self.action]
        if self.data:
            args += ["-d", self.data]
        if self.package:
            args += ["-p", self.package]
        if self.component:
            args += ["-n", self.component]
        if self.flags:
            args += ["-f", hex(self.flags)]
        for key, value in self.extras.items():
            args += ["--es", key, value]
        return args

    def __str__(self):
        return " ".join(self.to_args())


class ActivityManager:
    """Starts activities by shelling out to `am start`."""

    def __init__(self, binary: str = AM_BINARY, timeout: Optional[float] = DISPATCH_TIMEOUT_S):
        self.binary = binary
        self.timeout = timeout

    def start_activity(self, target: str, intent: Intent) -> None:
        cmd = [self.binary, "start", "--user", "current", *intent.to_args()]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError as e:
            raise DispatchFailure(target, f"activity manager '{self.binary}' not found") from e
        except subprocess.TimeoutExpired as e:
            raise DispatchFailure(target, f"'{self.binary} start' timed out after {self.timeout}s") from e
        except OSError as e:
            raise DispatchFailure(target, f"could not run '{self.binary}': {e}") from e

        classify_output(target, proc.returncode, (proc.stdout or "") + (proc.stderr or ""))


def classify_output(target: str, returncode: int, output: str) -> None:
    """Raise the matching SignalError for a failed `am start`, return quietly otherwise."""
    text = output.strip()

    if any(marker in text for marker in _SECURITY_MARKERS):
        raise SignalPermissionDenied(target, text)
    if any(marker in text for marker in _NOT_FOUND_MARKERS):
        raise TargetUnavailable(target, text)
    if returncode != 0 or "Error" in text:
        raise DispatchFailure(target, text or f"exit status {returncode}")
