# errors.py

"""
Error kinds raised at the boundaries of the event engine.

Collaborators (store client, chat binding) translate transport failures into
these types; the command and gateway layer catches ``DBEError`` and reports
to the user.
"""


class DBEError(Exception):
    """Base class for every recoverable engine error."""


class ValidationError(DBEError):
    """A request was rejected before any side effect (e.g. date in the past)."""


class NotFoundError(DBEError):
    """The event, message or channel does not exist."""


class PermissionDeniedError(DBEError):
    """The requesting user may not perform the operation."""


class StoreError(DBEError):
    """The backend store failed, timed out or answered with an error."""


class StoreUnavailableError(StoreError):
    """The store could not list events at all."""


class ChatPlatformError(DBEError):
    """A Discord call failed or timed out."""


class CreationError(DBEError):
    """An event could not be created; no orphan message was left behind."""
