import pytest

from trackman import activity
from trackman.exceptions import RegistrationFailure
from trackman.permissions import PermissionChecker
from trackman.receiver import TransitionReceiver, extract_events
from trackman.store import StatusStore
from trackman.transitions import WebhookTransitionSource, build_transition_list


def test_transition_list_covers_enter_and_exit():
    transitions = build_transition_list()
    assert len(transitions) == 10
    assert (activity.IN_VEHICLE, activity.ACTIVITY_TRANSITION_ENTER) in transitions
    assert (activity.STILL, activity.ACTIVITY_TRANSITION_EXIT) in transitions
    assert all(a != activity.ON_FOOT for a, _ in transitions)


def test_receiver_records_every_event(payload):
    store = StatusStore()
    receiver = TransitionReceiver(store)

    recorded = receiver.on_receive(payload(
        (activity.WALKING, activity.ACTIVITY_TRANSITION_ENTER),
        (12, activity.ACTIVITY_TRANSITION_EXIT),
        (activity.STILL, activity.ACTIVITY_TRANSITION_ENTER),
    ))

    assert recorded == 3
    assert store.snapshot().update_count == 3
    assert store.current_activity.value.title == "Still"


def test_receiver_ignores_foreign_action():
    store = StatusStore()
    recorded = TransitionReceiver(store).on_receive({"action": "other", "transitionEvents": [
        {"activityType": 0, "transitionType": 0},
    ]})
    assert recorded == 0
    assert store.snapshot().update_count == 0


def test_receiver_ignores_payload_without_result():
    store = StatusStore()
    assert TransitionReceiver(store).on_receive({"action": "com.chromian.trackman.TRANSITION_ACTION"}) == 0


def test_malformed_event_records_nothing():
    store = StatusStore()
    with pytest.raises(ValueError):
        TransitionReceiver(store).on_receive({
            "action": "com.chromian.trackman.TRANSITION_ACTION",
            "transitionEvents": [{"activityType": 0, "transitionType": 0}, {"activityType": "car"}],
        })
    assert store.snapshot().update_count == 0


def test_extract_events_keeps_timestamp():
    events = extract_events({"transitionEvents": [
        {"activityType": 3, "transitionType": 1, "elapsedRealTimeNanos": 1234},
    ]})
    assert events[0].elapsed_realtime_nanos == 1234


def test_register_requires_activity_permission():
    source = WebhookTransitionSource(PermissionChecker(grants={}, sdk_int=28))
    with pytest.raises(RegistrationFailure):
        source.register(object())
    assert not source.registered


def test_second_receiver_is_refused(granted):
    source = WebhookTransitionSource(granted)
    source.register(object())
    with pytest.raises(RegistrationFailure):
        source.register(object())


def test_deliver_while_unregistered_is_ignored(granted, payload):
    source = WebhookTransitionSource(granted)
    assert source.deliver(payload((0, 0))) is None


def test_unregister_twice_is_harmless(granted):
    source = WebhookTransitionSource(granted)
    source.register(object())
    source.unregister()
    source.unregister()
    assert not source.registered
    assert source.requested == []
