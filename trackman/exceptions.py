class TrackmanError(Exception):
    """Base class for every error raised by trackman."""


class PermissionMissing(TrackmanError):
    """A required runtime capability has not been granted."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing permission(s): {', '.join(self.missing)}")


class RegistrationFailure(TrackmanError):
    """The platform refused the transition-update subscription."""


# ---------------------------------------------------
#                 SIGNAL ERRORS
# ---------------------------------------------------
class SignalError(TrackmanError):
    """A start/stop request could not be delivered to a tracker app."""

    def __init__(self, target, message):
        self.target = target
        super().__init__(message)


class TargetUnavailable(SignalError):
    """Tracker app missing, or it does not handle the requested action."""


class SignalPermissionDenied(SignalError):
    """The calling process is not allowed to address the tracker app."""


class DispatchFailure(SignalError):
    """Any other dispatch failure."""
