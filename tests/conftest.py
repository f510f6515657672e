import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="trackman-logs-"))

from concurrent.futures import Future

import pytest

from trackman.exceptions import TargetUnavailable
from trackman.permissions import Capability, PermissionChecker


class ImmediateExecutor:
    """Runs submitted work inline so dispatch results are visible at once."""

    def __init__(self):
        self.futures = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.futures.append(future)
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True):
        pass


class FakeDispatcher:
    def __init__(self):
        self.sent = []
        self.failures = {}

    def fail(self, target, error):
        self.failures[target] = error

    def start_activity(self, target, intent):
        error = self.failures.get(target)
        if error is not None:
            raise error
        self.sent.append((target, intent))

    def for_target(self, target):
        return [intent for t, intent in self.sent if t == target]


class FakeNotifier:
    def __init__(self):
        self.status = None
        self.history = []
        self.notices = []

    def show_status(self, text):
        self.status = text
        self.history.append(text)

    def clear_status(self):
        self.status = None

    def notice(self, text):
        self.notices.append(text)


@pytest.fixture()
def dispatcher():
    return FakeDispatcher()


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def executor():
    return ImmediateExecutor()


@pytest.fixture()
def granted():
    return PermissionChecker(
        grants={Capability.ACTIVITY_RECOGNITION: True, Capability.POST_NOTIFICATIONS: True},
        sdk_int=34,
        app_package="com.termux",
    )


@pytest.fixture()
def not_installed():
    return lambda target: TargetUnavailable(target, "Error: Activity not started, unable to resolve Intent")


@pytest.fixture()
def service(dispatcher, notifier, granted, executor):
    from trackman.main import build_service

    return build_service(dispatcher=dispatcher, notifier=notifier, permissions=granted, executor=executor)


def transition_payload(*pairs):
    return {
        "action": "com.chromian.trackman.TRANSITION_ACTION",
        "transitionEvents": [
            {"activityType": activity, "transitionType": transition} for activity, transition in pairs
        ],
    }


@pytest.fixture()
def payload():
    return transition_payload
