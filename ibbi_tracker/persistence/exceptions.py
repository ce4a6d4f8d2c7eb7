"""Persistence layer exceptions."""


class PersistenceError(Exception):
    """Raised when an output artifact or the run marker cannot be written.

    Surfaces to the caller of a run as a failed run outcome.
    """

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)
