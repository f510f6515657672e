"""
Geo Tracker control through its `geotracker://recorder/<action>` URIs.

The URI scheme carries no track metadata; extras are rejected.
"""
from trackman.config import GEOTRACKER_PACKAGE
from trackman.intents import ACTION_VIEW, FLAG_ACTIVITY_NEW_TASK, Intent
from trackman.policy import GEOTRACKER, Verb
from trackman.signaler import TrackerSignaler, TrackerTarget

URI_TEMPLATE = "geotracker://recorder/{}"


class GeoTrackerSignaler(TrackerSignaler):
    not_found_notice = "Geo Tracker not found or cannot handle action."
    permission_notice = "Permission denied for Geo Tracker action."
    failure_notice = "Failed to signal Geo Tracker."

    def __init__(self, dispatcher=None, notifier=None, package: str = GEOTRACKER_PACKAGE):
        super().__init__(dispatcher, notifier)
        self.target = TrackerTarget(
            key=GEOTRACKER,
            label="Geo Tracker",
            package=package,
            verbs=frozenset(Verb),
        )

    def build_intent(self, verb: Verb, **extras) -> Intent:
        if extras:
            raise ValueError(f"Geo Tracker does not accept extras: {sorted(extras)}")

        # restrict delivery to Geo Tracker itself
        intent = Intent(action=ACTION_VIEW, data=URI_TEMPLATE.format(verb.value), package=self.target.package)
        intent.add_flags(FLAG_ACTIVITY_NEW_TASK)
        return intent
