"""
Errors raised while declaring, describing and running hooks.
"""


class HookdefError(Exception):
    """Base class for all hookdef errors."""


class DeclarationError(HookdefError):
    """A hook was registered with an invalid event, matcher or handler."""


class UsageError(HookdefError):
    """The runner was invoked with missing or malformed arguments."""


class PayloadParseError(HookdefError):
    """The event payload on stdin is not valid JSON."""


class EventMismatchError(HookdefError):
    """The payload's event does not match the event named on the command line."""


class HandlerExecutionError(HookdefError):
    """A hook handler raised or returned something unusable."""


class RegistryLoadError(HookdefError):
    """A declaration file could not be loaded or does not define a registry."""


class DescribeError(HookdefError):
    """Running a declaration file in describe mode failed."""


class SettingsShapeError(HookdefError):
    """A settings document has a hooks section the reconciler cannot safely edit."""
