"""Error taxonomy shared by the engine, the stores and the HTTP layer."""

from typing import Any, Optional


class TournamentError(Exception):
    """Base class. ``reason`` is safe to show to the organiser."""

    status_code = 400

    def __init__(self, reason: str, details: Optional[Any] = None):
        super().__init__(reason)
        self.reason = reason
        self.details = details


class ValidationError(TournamentError):
    """Roster size, gender ratio, duplicate name or otherwise malformed input."""


class MalformedRosterError(ValidationError):
    """Raised by the round generator when called with a roster that breaks format rules."""


class ScoreRangeError(TournamentError):
    pass


class TournamentEndedError(TournamentError):
    status_code = 409

    def __init__(self, reason: str = "Tournament is already completed", details: Optional[Any] = None):
        super().__init__(reason, details)


class NotFoundError(TournamentError):
    status_code = 404


class ShareConflictError(TournamentError):
    """Share identifier collided and the single retry collided as well."""

    status_code = 500


class StorageError(TournamentError):
    status_code = 500
