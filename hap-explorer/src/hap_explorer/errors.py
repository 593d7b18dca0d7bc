from __future__ import annotations


class HapExplorerError(RuntimeError):
    """Base class for errors raised by the exploration engine."""


class HapLaunchError(HapExplorerError):
    """The application could not be brought to the foreground.

    This is the only error that terminates an exploration session.
    """


class EventDispatchError(HapExplorerError):
    """An event that must never reach the device was dispatched."""


class UnsupportedEventError(ValueError):
    """Raised when an event record carries an unknown `type`."""


class ReplayLoadError(HapExplorerError):
    pass


class ConfigValidationError(HapExplorerError):
    pass
