"""Exceptions raised by the persistence and media layers."""


class PlayerError(Exception):
    """Base class for course player failures."""


class BackendError(PlayerError):
    """A progress, quiz or certificate call could not be persisted."""


class MediaError(PlayerError):
    """The episode video failed to load or play."""


class NotFoundError(BackendError):
    pass


class CertificateExistsError(BackendError):
    pass


class NotEligibleError(BackendError):
    """Raised when a certificate is requested before its courses are completed."""

    def __init__(self, message: str, completed: int = 0, total: int = 0):
        super().__init__(message)
        self.completed = completed
        self.total = total
