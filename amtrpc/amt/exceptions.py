"""Exception hierarchy for management engine access."""


class AMTError(Exception):
    """Base exception for all management engine errors."""


class HECIError(AMTError):
    """MEI device could not be opened, connected, written or read."""


class PTHIStatusError(AMTError):
    """The AMT host interface answered with a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)
