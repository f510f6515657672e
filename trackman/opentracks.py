"""
OpenTracks control through its Public API activities.

The Public API has to be enabled in OpenTracks itself
(Settings -> Integrations -> Public API), otherwise starts are refused.
"""
from trackman.config import OPENTRACKS_PACKAGE
from trackman.intents import FLAG_ACTIVITY_NEW_TASK, Intent
from trackman.policy import OPENTRACKS, Verb
from trackman.signaler import TrackerSignaler, TrackerTarget

# Package variants
FDROID     = "de.dennisguse.opentracks"
PLAY_STORE = "de.dennisguse.opentracks.playStore"
DEBUG      = "de.dennisguse.opentracks.debug"
NIGHTLY    = "de.dennisguse.opentracks.nightly"

BASE_CLASS_PATH = "de.dennisguse.opentracks.publicapi"
START_RECORDING_CLASS = f"{BASE_CLASS_PATH}.StartRecording"
STOP_RECORDING_CLASS = f"{BASE_CLASS_PATH}.StopRecording"

# extras accepted by StartRecording
EXTRA_TRACK_NAME = "TRACK_NAME"
EXTRA_TRACK_DESCRIPTION = "TRACK_DESCRIPTION"
EXTRA_TRACK_CATEGORY = "TRACK_CATEGORY"
EXTRA_TRACK_ICON = "TRACK_ICON"

_START_EXTRAS = {
    "name": EXTRA_TRACK_NAME,
    "description": EXTRA_TRACK_DESCRIPTION,
    "category": EXTRA_TRACK_CATEGORY,
    "icon": EXTRA_TRACK_ICON,   # non-localized id, e.g. "activity_run"
}


class OpenTracksSignaler(TrackerSignaler):
    not_found_notice = "OpenTracks not found or API not available/enabled."
    permission_notice = "Permission denied. Enable OpenTracks Public API?"
    failure_notice = "Failed to signal OpenTracks."

    def __init__(self, dispatcher=None, notifier=None, package: str = OPENTRACKS_PACKAGE):
        super().__init__(dispatcher, notifier)
        self.target = TrackerTarget(
            key=OPENTRACKS,
            label="OpenTracks",
            package=package,
            verbs=frozenset({Verb.START, Verb.STOP}),
        )

    def build_intent(self, verb: Verb, **extras) -> Intent:
        unknown = set(extras) - set(_START_EXTRAS)
        if unknown:
            raise ValueError(f"Unsupported OpenTracks extras: {sorted(unknown)}")

        class_name = START_RECORDING_CLASS if verb is Verb.START else STOP_RECORDING_CLASS
        intent = Intent().set_class_name(self.target.package, class_name)
        intent.add_flags(FLAG_ACTIVITY_NEW_TASK)

        if verb is Verb.START:
            # only the extras that were actually provided
            for key, extra_name in _START_EXTRAS.items():
                value = extras.get(key)
                if value is not None:
                    intent.put_extra(extra_name, value)

        return intent
