import pytest

from trackman.exceptions import DispatchFailure, SignalPermissionDenied, TargetUnavailable
from trackman.geotracker import GeoTrackerSignaler
from trackman.opentracks import OpenTracksSignaler, PLAY_STORE
from trackman.policy import Verb


def test_opentracks_start_carries_only_provided_extras(dispatcher, notifier):
    signaler = OpenTracksSignaler(dispatcher, notifier)

    assert signaler.signal(Verb.START, category="In Vehicle Detection") is None

    (target, intent), = dispatcher.sent
    assert target == "opentracks"
    assert intent.component == "de.dennisguse.opentracks/de.dennisguse.opentracks.publicapi.StartRecording"
    assert intent.extras == {"TRACK_CATEGORY": "In Vehicle Detection"}


def test_opentracks_stop_drops_extras(dispatcher, notifier):
    OpenTracksSignaler(dispatcher, notifier).signal(Verb.STOP, name="ignored")

    intent = dispatcher.for_target("opentracks")[0]
    assert intent.component.endswith(".publicapi.StopRecording")
    assert intent.extras == {}


def test_opentracks_package_variant(dispatcher, notifier):
    OpenTracksSignaler(dispatcher, notifier, package=PLAY_STORE).signal(Verb.STOP)
    assert dispatcher.sent[0][1].component.startswith(PLAY_STORE + "/")


def test_opentracks_rejects_pause(dispatcher, notifier):
    with pytest.raises(ValueError):
        OpenTracksSignaler(dispatcher, notifier).signal(Verb.PAUSE)


@pytest.mark.parametrize("verb", list(Verb))
def test_geotracker_uri_per_verb(dispatcher, notifier, verb):
    GeoTrackerSignaler(dispatcher, notifier).signal(verb)

    intent = dispatcher.for_target("geotracker")[0]
    assert intent.action == "android.intent.action.VIEW"
    assert intent.data == f"geotracker://recorder/{verb.value}"
    assert intent.package == "com.ilyabogdanovich.geotracker"
    assert intent.extras == {}


@pytest.mark.parametrize("error, notice", [
    (TargetUnavailable("geotracker", "unable to resolve Intent"), "Geo Tracker not found or cannot handle action."),
    (SignalPermissionDenied("geotracker", "Permission Denial"), "Permission denied for Geo Tracker action."),
    (DispatchFailure("geotracker", "exit status 1"), "Failed to signal Geo Tracker."),
])
def test_geotracker_failures_become_notices(dispatcher, notifier, error, notice):
    dispatcher.fail("geotracker", error)

    result = GeoTrackerSignaler(dispatcher, notifier).signal(Verb.START)

    assert result is error
    assert notifier.notices == [notice]


def test_opentracks_not_installed_notice(dispatcher, notifier, not_installed):
    dispatcher.fail("opentracks", not_installed("opentracks"))

    result = OpenTracksSignaler(dispatcher, notifier).signal(Verb.START)

    assert isinstance(result, TargetUnavailable)
    assert notifier.notices == ["OpenTracks not found or API not available/enabled."]


def test_unexpected_error_is_wrapped(dispatcher, notifier):
    dispatcher.fail("opentracks", RuntimeError("binder died"))

    result = OpenTracksSignaler(dispatcher, notifier).signal(Verb.STOP)

    assert isinstance(result, DispatchFailure)
    assert notifier.notices == ["Failed to signal OpenTracks."]
