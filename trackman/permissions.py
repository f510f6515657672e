"""Runtime capability grants that gate tracking."""
from enum import Enum
from typing import Dict, List, Optional

from trackman import config
from trackman.intents import Intent

ACTION_APPLICATION_DETAILS_SETTINGS = "android.settings.APPLICATION_DETAILS_SETTINGS"

# notifications need an explicit grant from Android 13 (API 33)
TIRAMISU = 33


class Capability(Enum):
    ACTIVITY_RECOGNITION = "android.permission.ACTIVITY_RECOGNITION"
    POST_NOTIFICATIONS = "android.permission.POST_NOTIFICATIONS"


class PermissionChecker:
    def __init__(self, grants: Optional[Dict[Capability, bool]] = None, sdk_int: int = None,
                 app_package: str = None):
        if grants is None:
            grants = {
                Capability.ACTIVITY_RECOGNITION: config.ACTIVITY_RECOGNITION_GRANTED,
                Capability.POST_NOTIFICATIONS: config.POST_NOTIFICATIONS_GRANTED,
            }
        self.grants = dict(grants)
        self.sdk_int = config.SDK_INT if sdk_int is None else sdk_int
        self.app_package = app_package or config.APP_PACKAGE

    def is_granted(self, capability: Capability) -> bool:
        return bool(self.grants.get(capability, False))

    def grant(self, capability: Capability, granted: bool = True) -> None:
        self.grants[capability] = granted

    def has_activity_permission(self) -> bool:
        return self.is_granted(Capability.ACTIVITY_RECOGNITION)

    def required(self) -> List[Capability]:
        needed = [Capability.ACTIVITY_RECOGNITION]
        if self.sdk_int >= TIRAMISU:
            needed.append(Capability.POST_NOTIFICATIONS)
        return needed

    def missing(self) -> List[Capability]:
        return [c for c in self.required() if not self.is_granted(c)]

    def settings_uri(self) -> str:
        return f"package:{self.app_package}"

    def settings_intent(self) -> Intent:
        """Deep link to this app's system settings page."""
        return Intent(action=ACTION_APPLICATION_DETAILS_SETTINGS, data=self.settings_uri())
