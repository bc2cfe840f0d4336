from __future__ import annotations


class FitTrackError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FitTrackError):
    status_code = 404

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class TransitionError(FitTrackError):
    status_code = 409

    def __init__(self, entity: str, current: str, new: str):
        super().__init__(f"{entity} cannot move from '{current}' to '{new}'")
        self.current = current
        self.new = new


class AuthError(FitTrackError):
    status_code = 401
