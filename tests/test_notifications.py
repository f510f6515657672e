import subprocess

import pytest

from trackman import notifications
from trackman.activity import ActivityType
from trackman.notifications import LogNotifier, TermuxNotifier, make_notifier, status_text


@pytest.mark.parametrize("activity, text", [
    (None, "Tracking activity..."),
    (ActivityType.UNKNOWN, "Tracking activity..."),
    (ActivityType.IN_VEHICLE, "In Vehicle"),
    (ActivityType.STILL, "Still"),
])
def test_status_text(activity, text):
    assert status_text(activity) == text


def test_make_notifier():
    assert isinstance(make_notifier("log"), LogNotifier)
    assert isinstance(make_notifier("termux"), TermuxNotifier)
    with pytest.raises(ValueError):
        make_notifier("desktop")


def test_termux_notifier_reuses_one_slot(monkeypatch):
    calls = []
    monkeypatch.setattr(notifications.subprocess, "run", lambda cmd, **kw: calls.append(cmd))

    notifier = TermuxNotifier()
    notifier.show_status("Still")
    notifier.show_status("In Vehicle")
    notifier.clear_status()

    assert [c[0] for c in calls] == ["termux-notification", "termux-notification", "termux-notification-remove"]
    assert calls[0][calls[0].index("--id") + 1] == "2"
    assert "--ongoing" in calls[1]
    assert calls[1][calls[1].index("--content") + 1] == "In Vehicle"
    assert calls[2] == ["termux-notification-remove", "2"]


def test_termux_notifier_failure_is_logged_not_raised(monkeypatch):
    def missing(cmd, **kw):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(notifications.subprocess, "run", missing)
    assert TermuxNotifier()._run(["termux-toast", "hi"]) is False


def test_termux_toast(monkeypatch):
    calls = []
    monkeypatch.setattr(notifications.subprocess, "run", lambda cmd, **kw: calls.append(cmd))
    TermuxNotifier().notice("Failed to signal Geo Tracker.")
    assert calls == [["termux-toast", "Failed to signal Geo Tracker."]]


def test_called_process_error_is_handled(monkeypatch):
    def fail(cmd, **kw):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(notifications.subprocess, "run", fail)
    TermuxNotifier().clear_status()
